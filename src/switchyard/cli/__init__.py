"""Switchyard CLI — URL inspection and hub introspection.

Entry point registered as ``switchyard`` in ``pyproject.toml``::

    [project.scripts]
    switchyard = "switchyard.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``switchyard`` command."""
    parser = argparse.ArgumentParser(
        prog="switchyard",
        description="Switchyard — in-process URL routing, service dispatch, and events.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- switchyard parse -------------------------------------------------
    parse_parser = subparsers.add_parser("parse", help="Show how a URL is routed")
    parse_parser.add_argument("url", help="URL to parse")
    parse_parser.add_argument(
        "--scheme",
        action="append",
        default=[],
        help="Extra URL scheme to accept (repeatable)",
    )
    parse_parser.add_argument(
        "--manifest",
        default=None,
        help="TOML manifest declaring url_types schemes",
    )
    parse_parser.add_argument(
        "--strict-hosts",
        action="store_true",
        help="Only keep domain and IPv4 hosts as path segments",
    )

    # -- switchyard routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes and providers")
    routes_parser.add_argument(
        "hub",
        help="Import string naming a Hub, Service, or Provider (e.g. myapp:hub)",
    )
    routes_parser.add_argument(
        "--manifest",
        default=None,
        help="TOML manifest configuring a hub built around a Service or Provider",
    )

    # -- switchyard open --------------------------------------------------
    open_parser = subparsers.add_parser("open", help="Open a URL on a hub")
    open_parser.add_argument(
        "hub",
        help="Import string naming a Hub, Service, or Provider (e.g. myapp:hub)",
    )
    open_parser.add_argument(
        "--manifest",
        default=None,
        help="TOML manifest configuring a hub built around a Service or Provider",
    )
    open_parser.add_argument("url", help="URL to open")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "parse":
        from switchyard.cli._parse import run_parse

        run_parse(args)
    elif args.command == "routes":
        from switchyard.cli._routes import run_routes

        run_routes(args)
    elif args.command == "open":
        from switchyard.cli._routes import run_open

        run_open(args)
