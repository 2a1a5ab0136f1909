"""
Command-line entry point for Octopus lookups.

Usage:
    octopus-lookup environments
    octopus-lookup machines --role web --environment Environments-1 --only-enabled
    octopus-lookup machines --thumbprint 8A1F...
    octopus-lookup project "My Project"
    octopus-lookup machines --role web | octopus-lookup join
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from octopus_lookup import __version__
from octopus_lookup.common import configure_logging, join_values
from octopus_lookup.config import DefaultSettings, OctopusConfig
from octopus_lookup.core import LookupService
from octopus_lookup.error_handler import ErrorHandler
from octopus_lookup.schemas import Machine

logger = logging.getLogger(__name__)

# Columns printed per record in text output
TEXT_FIELDS = {Machine: ("name", "thumbprint", "uri")}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="octopus-lookup",
        description="Read-only lookups against an Octopus Deploy server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  OCTOPUS_API_KEY      # Default API key when --api-key is not given
  OCTOPUS_SERVER       # Default server address when --server is not given
        """,
    )
    parser.add_argument("--api-key", help="Octopus API key")
    parser.add_argument("--server", help="Octopus server address, e.g. https://octopus.local")
    parser.add_argument("--env-file", type=Path, help="Load defaults from this .env file")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--version", action="version", version=f"octopus-lookup v{__version__}"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("environments", help="List environment names and IDs")

    machines = sub.add_parser("machines", help="Find deployment targets")
    machines.add_argument("--environment", help="Environment ID, e.g. Environments-1")
    machines.add_argument("--role", help="Target role")
    machines.add_argument("--thumbprint", help="Certificate thumbprint")
    machines.add_argument("--tentacle-name", help="Host name inside the tentacle URI")
    machines.add_argument(
        "--only-enabled", action="store_true", help="Skip disabled targets"
    )

    project = sub.add_parser("project", help="Find projects by name")
    project.add_argument("name")

    sub.add_parser("join", help="Join lines from stdin with commas")
    return parser


def _emit(result: Any, output: str) -> None:
    if output == "json":
        print(json.dumps(_to_jsonable(result), indent=2))
        return
    for item in result:
        if isinstance(item, str):
            print(item)
        else:
            fields = TEXT_FIELDS.get(type(item)) or list(type(item).model_fields)
            values = (getattr(item, f) for f in fields)
            print("\t".join("" if v is None else str(v) for v in values))


def _to_jsonable(result: Any) -> Any:
    if result is None:
        return None
    return [
        item if isinstance(item, str) else item.model_dump(mode="json")
        for item in result
    ]


def _run_machines(service: LookupService, args: argparse.Namespace) -> List[Any]:
    if args.thumbprint:
        return service.get_machines_by_thumbprint(
            args.thumbprint, only_enabled=args.only_enabled
        )
    if args.tentacle_name:
        return service.get_machines_by_tentacle_name(
            args.tentacle_name, only_enabled=args.only_enabled
        )
    if args.role and args.environment:
        return service.get_machines_in_role_and_environment(
            args.role, args.environment, only_enabled=args.only_enabled
        )
    if args.role:
        return service.get_machines_in_role(args.role, only_enabled=args.only_enabled)
    return service.get_machines_in_environment(
        args.environment, only_enabled=args.only_enabled
    )


@ErrorHandler.handle_main_execution
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "machines":
        selectors = [
            flag
            for flag, value in (
                ("--environment", args.environment),
                ("--role", args.role),
                ("--thumbprint", args.thumbprint),
                ("--tentacle-name", args.tentacle_name),
            )
            if value
        ]
        if not selectors:
            parser.error(
                "machines requires --environment, --role, --thumbprint or --tentacle-name"
            )
        # --role with --environment is the only combined lookup
        if len(selectors) > 1 and sorted(selectors) != ["--environment", "--role"]:
            parser.error(f"cannot combine {' and '.join(selectors)}")

    configure_logging(args.log_file, args.log_level)

    if args.command == "join":
        joined = join_values(
            line.rstrip("\r\n") for line in sys.stdin if line.strip()
        )
        if joined is not None:
            print(joined)
        return 0

    defaults = DefaultSettings.from_env(args.env_file)
    config = OctopusConfig.resolve(
        api_key=args.api_key, server=args.server, defaults=defaults
    )
    logger.info(f"Using Octopus server: {config.server}")
    service = LookupService(config)

    if args.command == "environments":
        result: Any = service.list_environments()
    elif args.command == "machines":
        result = _run_machines(service, args)
    else:
        result = service.get_project_by_name(args.name)
        if result is None:
            print(f"No results for project '{args.name}'", file=sys.stderr)
            if args.output == "json":
                _emit(None, args.output)
            return 0

    _emit(result, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
