"""
Octopus Lookup

Read-only convenience lookups over the Octopus Deploy REST API.

Code Structure:
- clients.py: HTTP query executor
- config.py: Default settings and credential/endpoint resolution
- core.py: Lookup operations
- schemas.py: Pydantic models for API responses
- common.py: Shared utilities, logging, and exceptions
- error_handler.py: CLI error reporting
"""

from octopus_lookup.clients import ParsedJSON, get
from octopus_lookup.common import (
    ConfigMissing,
    ConfigurationError,
    RequestFailed,
    ResponseShapeError,
    join_values,
)
from octopus_lookup.config import (
    DefaultSettings,
    OctopusConfig,
    resolve_credentials,
    resolve_endpoint,
)
from octopus_lookup.core import (
    LookupService,
    get_machines_by_tentacle_name,
    get_machines_by_thumbprint,
    get_machines_in_environment,
    get_machines_in_role,
    get_machines_in_role_and_environment,
    get_project_by_name,
    list_environments,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigMissing",
    "ConfigurationError",
    "DefaultSettings",
    "LookupService",
    "OctopusConfig",
    "ParsedJSON",
    "RequestFailed",
    "ResponseShapeError",
    "get",
    "get_machines_by_tentacle_name",
    "get_machines_by_thumbprint",
    "get_machines_in_environment",
    "get_machines_in_role",
    "get_machines_in_role_and_environment",
    "get_project_by_name",
    "join_values",
    "list_environments",
    "resolve_credentials",
    "resolve_endpoint",
]
