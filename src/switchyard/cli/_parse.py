"""``switchyard parse`` — show how a URL breaks down.

Prints the scheme, segments, router path, query parameters, and the
service request the URL would produce. Exits with code 1 when the URL
is not routable.
"""

import argparse
import sys

from switchyard.config import HubConfig
from switchyard.errors import ConfigurationError
from switchyard.routing.urls import URLParser


def run_parse(args: argparse.Namespace) -> None:
    try:
        config = HubConfig.from_manifest(args.manifest) if args.manifest else HubConfig()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    config = config.with_schemes(args.scheme)

    parser = URLParser(config.schemes, label_hosts=not args.strict_hosts)
    parsed = parser.parse(args.url)
    if parsed is None:
        print(f"Not routable: {args.url}", file=sys.stderr)
        raise SystemExit(1)

    print(f"scheme:     {parsed.scheme}")
    print(f"segments:   {', '.join(parsed.segments)}")
    print(f"path:       {parsed.path}")
    for key, value in sorted(parsed.parameters.items()):
        print(f"param:      {key}={value}")

    request = parser.service_request(args.url)
    if request is None:
        print("service:    -")
        return
    print(f"provider:   {request.provider}")
    print(f"action:     {request.action}")
    print(f"subpath:    {request.path or '-'}")
