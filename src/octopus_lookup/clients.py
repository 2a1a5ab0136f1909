# src/octopus_lookup/clients.py
"""
HTTP client for querying the Octopus Deploy REST API.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from octopus_lookup.common import RequestFailed
from octopus_lookup.config import AuthHeader, OctopusConfig

logger = logging.getLogger(__name__)

ParsedJSON = Union[Dict[str, Any], List[Any]]


class APIClient:
    """Issues authenticated GET requests and decodes the JSON body."""

    def __init__(
        self,
        base_url: str,
        header: AuthHeader,
        session: Optional[requests.Session] = None,
    ):
        # The base is used verbatim; callers supply paths with their leading slash.
        self.base_url = base_url
        self.header = dict(header)
        self._owns_session = session is None
        self.s = session if session is not None else requests.Session()

    @classmethod
    def from_config(
        cls, config: OctopusConfig, session: Optional[requests.Session] = None
    ) -> "APIClient":
        return cls(config.server, config.auth_header, session=session)

    def close(self) -> None:
        if self._owns_session:
            self.s.close()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _req(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """Makes an API request, raising RequestFailed on transport or HTTP errors."""
        url = f"{self.base_url}{endpoint}"
        headers = {"Accept": "application/json", **self.header}
        logger.info(f"HTTP Request: {method} {url}")
        try:
            response = self.s.request(method, url, headers=headers, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise RequestFailed(f"{method} {url} failed: {e}", method, url) from e

        response_body = (response.text or "").strip()
        if len(response_body) > 1000:
            response_body = response_body[:1000] + "…"
        logger.debug(
            f"HTTP Response: {method} {url} -> {response.status_code} | Body: {response_body}"
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(
                "%s %s -> %s | %s", method, url, response.status_code, response_body
            )
            raise RequestFailed(
                f"{method} {url} failed: {response.status_code} {response_body}",
                method,
                url,
                response.status_code,
            ) from e
        return response

    def get(self, path: str) -> ParsedJSON:
        """GETs ``path`` and returns the decoded JSON body."""
        response = self._req("GET", path)
        try:
            return response.json()
        except ValueError as e:
            url = f"{self.base_url}{path}"
            logger.error(f"GET {url} returned invalid JSON: {e}")
            raise RequestFailed(
                f"GET {url} returned invalid JSON: {e}",
                "GET",
                url,
                response.status_code,
            ) from e


def get(
    base: str,
    path: str,
    header: AuthHeader,
    session: Optional[requests.Session] = None,
) -> ParsedJSON:
    """Queries ``base + path`` once with ``header`` attached and decodes the JSON."""
    with APIClient(base, header, session=session) as client:
        return client.get(path)
