"""URL grammar — split app URLs into routable segments and parameters.

Accepted shapes::

    myapp://provider/action/sub1/sub2?key1=val1&key2=val2
    myapp://www.example.com/provider/action/sub1?key=val
    myapp://192.168.11.2/provider/action/sub1?key=val

The scheme must be whitelisted. A host that looks like a domain name or
an IPv4 address becomes the first path segment, so bridged domains route
through the same table. With ``label_hosts`` enabled, a bare identifier
host (``provider`` above) is also kept. Anything else in host position
is dropped.

Parsing never raises. URLs that cannot be routed produce ``None``.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import unquote, urlsplit

from switchyard.config import DEFAULT_SCHEMES
from switchyard.service.request import Request

_DOMAIN_RE = re.compile(r"(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,4}")
_OCTET = r"(?:25[0-5]|2[0-4]\d|1\d{2}|[1-9]?\d)"
_IPV4_RE = re.compile(rf"(?:{_OCTET}\.){{3}}{_OCTET}")
_LABEL_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def is_host(host: str) -> bool:
    """Return True if ``host`` is a domain name or an IPv4 address."""
    return bool(_DOMAIN_RE.fullmatch(host) or _IPV4_RE.fullmatch(host))


def split_path(path: str) -> list[str]:
    """Split a path on ``/``, dropping empty segments."""
    return [part for part in path.split("/") if part]


def normalize_path(path: str) -> str:
    """Canonical route key: segments joined with a single ``/``.

    ``"/user//profile/"`` -> ``"user/profile"``
    """
    return "/".join(split_path(path))


def query_parameters(query: str) -> dict[str, str]:
    """Decode a query string into a mapping; the last duplicate key wins.

    Only percent escapes are decoded. A literal ``+`` stays ``+``, unlike
    HTML form decoding. Keys without ``=`` map to ``""``.
    """
    parameters: dict[str, str] = {}
    for pair in query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        parameters[unquote(key)] = unquote(value)
    return parameters


def _raw_host(netloc: str) -> str:
    """Host portion of a netloc, case preserved, without userinfo or port."""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        # IPv6 literal, never routable
        return ""
    return host.partition(":")[0]


@dataclass(frozen=True, slots=True)
class ParsedURL:
    """A whitelisted URL broken into routable parts."""

    scheme: str
    segments: tuple[str, ...]
    parameters: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return "/".join(self.segments)


class URLParser:
    """Parses app URLs against a scheme whitelist.

    Usage::

        parser = URLParser(schemes={"myapp"})
        parser.router_parameters("myapp://user/profile?id=1")
        # -> ("user/profile", {"id": "1"})
        parser.service_request("myapp://user/profile/avatar?id=1")
        # -> Request(provider="user", action="profile", path="avatar", ...)
    """

    __slots__ = ("_label_hosts", "_schemes", "default_timeout")

    def __init__(
        self,
        schemes: Iterable[str] = (),
        *,
        label_hosts: bool = True,
        default_timeout: float = 5.0,
    ) -> None:
        self._schemes = frozenset(s.lower() for s in (*DEFAULT_SCHEMES, *schemes))
        self._label_hosts = label_hosts
        self.default_timeout = default_timeout

    @property
    def schemes(self) -> frozenset[str]:
        return self._schemes

    def accepts_host(self, host: str) -> bool:
        """Return True if ``host`` contributes a path segment."""
        if not host:
            return False
        if is_host(host):
            return True
        return self._label_hosts and _LABEL_RE.fullmatch(host) is not None

    def parse(self, url: str) -> ParsedURL | None:
        """Split ``url`` into segments and query parameters.

        Returns ``None`` for a missing or non-whitelisted scheme, a URL
        ``urllib`` cannot split, or a URL with no segments at all.
        """
        try:
            parts = urlsplit(url.strip())
        except ValueError:
            return None

        scheme = parts.scheme.lower()
        if not scheme or scheme not in self._schemes:
            return None

        segments = [unquote(part) for part in split_path(parts.path)]
        host = _raw_host(parts.netloc)
        if self.accepts_host(host):
            segments.insert(0, host)

        if not segments:
            return None

        parameters = query_parameters(parts.query)
        return ParsedURL(scheme=scheme, segments=tuple(segments), parameters=parameters)

    def router_parameters(self, url: str) -> tuple[str, dict[str, str]] | None:
        """Return ``(path, parameters)`` for router lookup, or ``None``."""
        parsed = self.parse(url)
        if parsed is None:
            return None
        return parsed.path, parsed.parameters

    def service_request(self, url: str) -> Request | None:
        """Build a ``Request`` from ``provider/action[/path...]``.

        Needs at least two segments; fewer is not a service URL and
        yields ``None``.
        """
        parsed = self.parse(url)
        if parsed is None or len(parsed.segments) < 2:
            return None
        provider, action_name, *rest = parsed.segments
        return Request(
            provider=provider,
            action=action_name,
            path="/".join(rest),
            timeout=self.default_timeout,
            parameters=parsed.parameters,
        )
