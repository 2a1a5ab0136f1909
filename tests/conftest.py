"""
Shared test fixtures and configuration.
"""

import json
from typing import Any, Optional
from unittest.mock import Mock

import pytest
import requests

from octopus_lookup.config import (
    API_KEY_ENV_VAR,
    SERVER_ENV_VAR,
    DefaultSettings,
    OctopusConfig,
)
from octopus_lookup.core import LookupService

SERVER = "https://octopus.test"
API_KEY = "API-TESTKEY"


def make_response(
    payload: Any = None, status_code: int = 200, body: Optional[str] = None
) -> requests.Response:
    """Build a real Response carrying ``payload`` as JSON (or a raw ``body``)."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    text = body if body is not None else json.dumps(payload)
    response._content = text.encode("utf-8")
    return response


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove the default API key and server from the environment for one test."""
    for var in (API_KEY_ENV_VAR, SERVER_ENV_VAR):
        # setenv first so the variable is restored to "unset" afterwards
        monkeypatch.setenv(var, "placeholder")
        monkeypatch.delenv(var)


@pytest.fixture
def defaults() -> DefaultSettings:
    return DefaultSettings(api_key=API_KEY, server=SERVER)


@pytest.fixture
def session() -> Mock:
    """A fake requests.Session; set ``session.request.return_value`` per test."""
    fake = Mock(spec=requests.Session)
    fake.request.return_value = make_response([])
    return fake


@pytest.fixture
def service(session: Mock) -> LookupService:
    return LookupService(OctopusConfig(server=SERVER, api_key=API_KEY), session=session)


@pytest.fixture
def machines_payload() -> list:
    return [
        {
            "Id": "Machines-1",
            "Name": "web-01",
            "Thumbprint": "8A1F3C",
            "Uri": "https://web-01.corp.local:10933/",
            "Roles": ["web", "telegraf"],
            "EnvironmentIds": ["Environments-1"],
            "IsDisabled": False,
        },
        {
            "Id": "Machines-2",
            "Name": "web-02",
            "Thumbprint": "77BE02",
            "Uri": "https://web-02.corp.local:10933/",
            "Roles": ["web"],
            "EnvironmentIds": ["Environments-2"],
            "IsDisabled": True,
        },
        {
            "Id": "Machines-3",
            "Name": "db-01",
            "Thumbprint": "C0FFEE",
            "Uri": "https://db-01.corp.local:10933/",
            "Roles": ["db", "telegraf"],
            "EnvironmentIds": ["Environments-1", "Environments-2"],
            "IsDisabled": False,
        },
        {
            "Id": "Machines-4",
            "Name": "web-03",
            "Thumbprint": "D15AB1",
            "Uri": "https://web-03.corp.local:10933/",
            "Roles": ["web", "telegraf"],
            "EnvironmentIds": ["Environments-1"],
            "IsDisabled": True,
        },
        {
            # Cloud regions, SSH and Kubernetes targets have no tentacle
            "Id": "Machines-5",
            "Name": "aws-region",
            "Thumbprint": None,
            "Uri": None,
            "Roles": ["cloud"],
            "EnvironmentIds": ["Environments-1"],
            "IsDisabled": False,
        },
    ]
