"""
Configuration management: process-wide defaults and credential/endpoint resolution.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import load_dotenv

from octopus_lookup.common import ConfigMissing, is_blank

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-Octopus-ApiKey"
API_KEY_ENV_VAR = "OCTOPUS_API_KEY"
SERVER_ENV_VAR = "OCTOPUS_SERVER"

AuthHeader = Dict[str, str]


@dataclass(frozen=True)
class DefaultSettings:
    """Process-wide fallback values for the API key and server address."""

    api_key: Optional[str] = None
    server: Optional[str] = None

    @classmethod
    def from_env(
        cls, env_file: Optional[Union[str, Path]] = None
    ) -> "DefaultSettings":
        """Reads the defaults from the environment, loading ``env_file`` first.

        Variables already present in the environment take precedence over
        the ones in the file.
        """
        if env_file is not None:
            env_path = Path(env_file)
            if env_path.exists():
                logger.debug(f"Loading environment from: {env_path}")
                load_dotenv(env_path)
            else:
                logger.warning(f"Environment file not found: {env_path}")
        api_key = os.getenv(API_KEY_ENV_VAR) or None
        server = os.getenv(SERVER_ENV_VAR) or None
        logger.debug(
            f"Defaults loaded - API key configured: {'Yes' if api_key else 'No'}, "
            f"server: {server or 'Not configured'}"
        )
        return cls(api_key=api_key, server=server)


@dataclass(frozen=True)
class OctopusConfig:
    """Resolved connection settings for one Octopus server."""

    server: str
    api_key: str

    @property
    def auth_header(self) -> AuthHeader:
        return {API_KEY_HEADER: self.api_key}

    @classmethod
    def resolve(
        cls,
        api_key: Optional[str] = None,
        server: Optional[str] = None,
        defaults: Optional[DefaultSettings] = None,
    ) -> "OctopusConfig":
        """Resolves both settings, falling back to ``defaults`` for missing ones."""
        if defaults is None:
            defaults = DefaultSettings.from_env()
        header = resolve_credentials(api_key, defaults)
        return cls(
            server=resolve_endpoint(server, defaults),
            api_key=header[API_KEY_HEADER],
        )

    def __repr__(self) -> str:
        return f"OctopusConfig(server={self.server!r}, api_key='***')"


def _resolve(
    explicit: Optional[str],
    default: Optional[str],
    setting: str,
    env_var: str,
) -> str:
    if not is_blank(explicit):
        return explicit
    if not is_blank(default):
        logger.debug(f"Using default {setting} from {env_var}")
        return default
    error = ConfigMissing(setting, env_var)
    logger.error(str(error))
    raise error


def resolve_credentials(
    explicit_key: Optional[str] = None, defaults: Optional[DefaultSettings] = None
) -> AuthHeader:
    """Builds the API key header from an explicit key or the configured default."""
    if is_blank(explicit_key) and defaults is None:
        defaults = DefaultSettings.from_env()
    key = _resolve(
        explicit_key,
        defaults.api_key if defaults else None,
        "API key",
        API_KEY_ENV_VAR,
    )
    return {API_KEY_HEADER: key}


def resolve_endpoint(
    explicit_name: Optional[str] = None, defaults: Optional[DefaultSettings] = None
) -> str:
    """Returns the server address from an explicit value or the configured default."""
    if is_blank(explicit_name) and defaults is None:
        defaults = DefaultSettings.from_env()
    return _resolve(
        explicit_name,
        defaults.server if defaults else None,
        "Octopus server",
        SERVER_ENV_VAR,
    )
