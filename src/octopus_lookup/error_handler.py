import logging
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

from octopus_lookup.common import ConfigurationError, RequestFailed

# Type variable for generic function signatures
F = TypeVar("F", bound=Callable[..., Any])

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Maps lookup failures to user-facing messages and exit codes."""

    @staticmethod
    def describe_request_failure(error: RequestFailed) -> str:
        status_code = error.status_code
        if status_code == 401:
            return "Authentication failed. Check the API key."
        if status_code == 403:
            return "Access forbidden. Check the API key's permissions."
        if status_code == 404:
            return f"Resource not found: {error.url}"
        if status_code is None:
            return f"Request failed. Check server connectivity. ({error})"
        return f"HTTP error {status_code}: {error}"

    @staticmethod
    def handle_main_execution(func: F) -> F:
        """Handle main execution with graceful error handling and proper exit codes."""

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Operation cancelled by user")
                print("\n⏹️ Operation cancelled by user.", file=sys.stderr)
                sys.exit(130)
            except ConfigurationError as e:
                logger.error(f"Configuration error: {e}")
                print(f"❌ Configuration Error: {e}", file=sys.stderr)
                sys.exit(1)
            except RequestFailed as e:
                logger.error(f"Lookup failed: {e}")
                print(
                    f"❌ Error: {ErrorHandler.describe_request_failure(e)}",
                    file=sys.stderr,
                )
                sys.exit(1)

        return wrapper  # type: ignore[return-value]
