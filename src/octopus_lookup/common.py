"""
Common utilities, exceptions, and logging configuration.
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Iterable, Optional


# --- Custom Exceptions ---


class ConfigurationError(Exception):
    """Exception for configuration errors."""

    pass


class ConfigMissing(ConfigurationError):
    """Neither an explicit value nor a process-wide default was available."""

    def __init__(self, setting: str, env_var: str):
        self.setting = setting
        self.env_var = env_var
        super().__init__(
            f"No {setting} supplied and {env_var} is not set in the environment"
        )


class RequestFailed(Exception):
    """A query against the Octopus server did not produce usable JSON."""

    def __init__(
        self,
        message: str,
        method: str = "GET",
        url: str = "",
        status_code: Optional[int] = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ResponseShapeError(RequestFailed):
    """The response parsed as JSON but not in the shape the endpoint returns."""

    pass


# --- Utility Functions ---


def join_values(items: Iterable[Any]) -> Optional[str]:
    """Joins values into one comma-separated string.

    Items are consumed one at a time, so generators and piped input work.
    Returns None for an empty input. Items are not escaped: a value that
    itself contains a comma makes the result ambiguous.
    """
    result = None
    for item in items:
        if result is None:
            result = str(item)
        else:
            result = f"{result},{item}"
    return result


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# --- Logging Configuration ---


def configure_logging(
    log_file: Optional[Path] = None, level: str = "INFO"
) -> Dict[str, Any]:
    """Apply the logging configuration and return it.

    Logs always go to stderr so they never mix with lookup results printed on
    stdout. When ``log_file`` is given, a rotating file handler is added too.
    """
    # example: 2025-08-08 12:34:56 | INFO     | octopus_lookup.core:42 | Found 3 machines
    fmt = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    handlers: Dict[str, Dict[str, Any]] = {
        "stderr": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        }
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "simple",
            "filename": str(log_file),
            "mode": "a",
            "maxBytes": 5 * 1024 * 1024,  # 5 MB
            "backupCount": 3,
            "encoding": "utf-8",
        }
    handler_names = list(handlers)

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": fmt,
                "datefmt": datefmt,
            }
        },
        "handlers": handlers,
        "loggers": {
            "octopus_lookup": {
                "handlers": handler_names,
                "level": level,
                "propagate": False,
            },
            # Noisy libraries can be tuned here if needed
            "urllib3": {
                "handlers": handler_names,
                "level": "WARNING",
                "propagate": False,
            },
        },
        "root": {"handlers": handler_names, "level": level},
    }
    logging.config.dictConfig(config)
    return config
