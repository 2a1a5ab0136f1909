"""
Lookup operations over environments, deployment targets, and projects.
"""

import logging
import re
from typing import Callable, Iterable, List, Optional
from urllib.parse import quote

import requests

from octopus_lookup.clients import APIClient
from octopus_lookup.config import DefaultSettings, OctopusConfig
from octopus_lookup.schemas import (
    ENVIRONMENT_MACHINES,
    ENVIRONMENTS_ALL,
    MACHINES_ALL,
    PROJECTS,
    Environment,
    EnvironmentSummary,
    Machine,
    Project,
    ProjectSummary,
    parse_records,
)

logger = logging.getLogger(__name__)

MachineFilter = Callable[[Machine], bool]


def _select(
    machines: Iterable[Machine], predicate: MachineFilter, only_enabled: bool
) -> List[Machine]:
    """Keeps matching machines in server order, dropping disabled ones if asked."""
    return [
        m
        for m in machines
        if predicate(m) and not (only_enabled and m.is_disabled)
    ]


def tentacle_name_matcher(tentacle_name: str) -> MachineFilter:
    """Matches machines whose Uri contains ``<tentacle_name>.`` anywhere."""
    pattern = re.compile(re.escape(tentacle_name) + r"\.", re.IGNORECASE)
    return lambda m: bool(pattern.search(m.uri or ""))


class LookupService:
    """Runs read-only lookups against one Octopus server."""

    def __init__(
        self, config: OctopusConfig, session: Optional[requests.Session] = None
    ):
        self.config = config
        self.session = session

    def _query(self, path: str):
        with APIClient.from_config(self.config, session=self.session) as client:
            return client.get(path)

    def _machines(self) -> List[Machine]:
        return parse_records(self._query(MACHINES_ALL), MACHINES_ALL, Machine)

    def list_environments(self) -> List[EnvironmentSummary]:
        environments = parse_records(
            self._query(ENVIRONMENTS_ALL), ENVIRONMENTS_ALL, Environment
        )
        logger.info(f"Found {len(environments)} environments")
        return [EnvironmentSummary(id=e.id, name=e.name) for e in environments]

    def get_machines_in_environment(
        self, environment_id: str, only_enabled: bool = False
    ) -> List[str]:
        path = ENVIRONMENT_MACHINES.format(environment_id=quote(environment_id))
        machines = parse_records(self._query(path), ENVIRONMENT_MACHINES, Machine)
        selected = _select(machines, lambda m: True, only_enabled)
        logger.info(
            f"Found {len(selected)} machines in environment '{environment_id}'"
        )
        return [m.name for m in selected]

    def get_machines_in_role(self, role: str, only_enabled: bool = False) -> List[str]:
        selected = _select(self._machines(), lambda m: role in m.roles, only_enabled)
        logger.info(f"Found {len(selected)} machines in role '{role}'")
        return [m.name for m in selected]

    def get_machines_in_role_and_environment(
        self, role: str, environment_id: str, only_enabled: bool = False
    ) -> List[str]:
        selected = _select(
            self._machines(),
            lambda m: role in m.roles and environment_id in m.environment_ids,
            only_enabled,
        )
        logger.info(
            f"Found {len(selected)} machines in role '{role}' "
            f"and environment '{environment_id}'"
        )
        return [m.name for m in selected]

    def get_machines_by_thumbprint(
        self, thumbprint: str, only_enabled: bool = False
    ) -> List[Machine]:
        """Returns the full records of machines with exactly this thumbprint.

        Thumbprints are hex strings, so the comparison ignores case. Targets
        without one, such as cloud regions, never match.
        """
        wanted = thumbprint.strip().lower()
        selected = _select(
            self._machines(),
            lambda m: m.thumbprint is not None and m.thumbprint.lower() == wanted,
            only_enabled,
        )
        logger.info(f"Found {len(selected)} machines with thumbprint '{thumbprint}'")
        return selected

    def get_machines_by_tentacle_name(
        self, tentacle_name: str, only_enabled: bool = False
    ) -> List[str]:
        selected = _select(
            self._machines(), tentacle_name_matcher(tentacle_name), only_enabled
        )
        logger.info(
            f"Found {len(selected)} machines with tentacle name '{tentacle_name}'"
        )
        return [m.name for m in selected]

    def get_project_by_name(self, name: str) -> Optional[List[ProjectSummary]]:
        """Returns every project the server matches for ``name``, or None.

        The server may match more than one project, so callers get a list.
        An empty match is reported as a WARNING log record, not an exception.
        """
        path = f"{PROJECTS}?name={quote(name)}"
        projects = parse_records(self._query(path), PROJECTS, Project)
        if not projects:
            logger.warning(f"No results for project name '{name}'")
            return None
        logger.info(f"Found {len(projects)} projects matching '{name}'")
        return [ProjectSummary(id=p.id, name=p.name, slug=p.slug) for p in projects]


# --- Module-level lookups ---
#
# Each resolves its configuration from the explicit arguments, falling back to
# the process-wide defaults, then runs a single lookup.


def _service(
    api_key: Optional[str],
    server: Optional[str],
    defaults: Optional[DefaultSettings],
    session: Optional[requests.Session],
) -> LookupService:
    config = OctopusConfig.resolve(api_key=api_key, server=server, defaults=defaults)
    return LookupService(config, session=session)


def list_environments(
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[EnvironmentSummary]:
    return _service(api_key, server, defaults, session).list_environments()


def get_machines_in_environment(
    environment_id: str,
    only_enabled: bool = False,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    return _service(api_key, server, defaults, session).get_machines_in_environment(
        environment_id, only_enabled=only_enabled
    )


def get_machines_in_role(
    role: str,
    only_enabled: bool = False,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    return _service(api_key, server, defaults, session).get_machines_in_role(
        role, only_enabled=only_enabled
    )


def get_machines_in_role_and_environment(
    role: str,
    environment_id: str,
    only_enabled: bool = False,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    service = _service(api_key, server, defaults, session)
    return service.get_machines_in_role_and_environment(
        role, environment_id, only_enabled=only_enabled
    )


def get_machines_by_thumbprint(
    thumbprint: str,
    only_enabled: bool = False,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[Machine]:
    return _service(api_key, server, defaults, session).get_machines_by_thumbprint(
        thumbprint, only_enabled=only_enabled
    )


def get_machines_by_tentacle_name(
    tentacle_name: str,
    only_enabled: bool = False,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> List[str]:
    service = _service(api_key, server, defaults, session)
    return service.get_machines_by_tentacle_name(
        tentacle_name, only_enabled=only_enabled
    )


def get_project_by_name(
    name: str,
    api_key: Optional[str] = None,
    server: Optional[str] = None,
    defaults: Optional[DefaultSettings] = None,
    session: Optional[requests.Session] = None,
) -> Optional[List[ProjectSummary]]:
    return _service(api_key, server, defaults, session).get_project_by_name(name)
