"""``switchyard routes`` and ``switchyard open`` — inspect and drive a hub.

Both load a Hub from an import string naming a Hub, Service, or
Provider. ``routes`` prints the route table and the registered
providers; ``open`` routes one URL and exits with code 1 if nothing
handled it.
"""

import argparse
import sys

from switchyard.cli._resolve import load_hub
from switchyard.errors import ConfigurationError
from switchyard.hub import Hub
from switchyard.routing.page import Page


def _load(args: argparse.Namespace) -> Hub:
    try:
        return load_hub(args.hub, args.manifest)
    except (ImportError, AttributeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


def run_routes(args: argparse.Namespace) -> None:
    """Print a PATH / KIND / TARGET table, then the providers."""
    hub = _load(args)

    routes = hub.router.routes
    if routes:
        rows: list[tuple[str, str, str]] = []
        for path, target in sorted(routes.items()):
            if isinstance(target, Page):
                rows.append((path, "page", f"{target.method.value} {target.target!r}"))
            else:
                rows.append((path, "handler", getattr(target, "__name__", repr(target))))

        max_path = max(max(len(r[0]) for r in rows), 4)  # "PATH" header
        fmt = f"{{:<{max_path}}}  {{:<7}}  {{}}"
        print(fmt.format("PATH", "KIND", "TARGET"))
        print("-" * min(max_path + 11 + max(len(r[2]) for r in rows), 80))
        for row in rows:
            print(fmt.format(*row))
    else:
        print("No routes registered.")

    providers = hub.service.providers
    if not providers:
        print("No providers registered.")
        return
    print()
    print("PROVIDERS")
    for name, provider in sorted(providers.items()):
        print(f"  {name}: {', '.join(sorted(provider.actions))}")


def run_open(args: argparse.Namespace) -> None:
    hub = _load(args)
    try:
        handled = hub.open(args.url)
    finally:
        hub.close()
    if not handled:
        print(f"Not handled: {args.url}", file=sys.stderr)
        raise SystemExit(1)
    print(f"Handled: {args.url}")
