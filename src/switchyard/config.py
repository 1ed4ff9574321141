"""Hub configuration.

HubConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.

Custom URL schemes are normally declared by the host application. Two
loaders cover that: ``HubConfig.from_manifest()`` reads a TOML manifest
and ``HubConfig.from_env()`` reads ``SWITCHYARD_*`` environment variables.
"""

import os
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from switchyard.errors import ConfigurationError

DEFAULT_SCHEMES: tuple[str, ...] = ("http", "https")


@dataclass(frozen=True, slots=True)
class HubConfig:
    """Hub configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = HubConfig(schemes=("myapp",), default_timeout=2.0)
    """

    # URL grammar
    schemes: tuple[str, ...] = ()  # App-declared schemes, added to http/https
    label_hosts: bool = True  # Route single-label hosts: myapp://provider/action

    # Service
    default_timeout: float = 5.0  # Seconds, for requests parsed from URLs
    max_workers: int | None = None  # None = ThreadPoolExecutor default
    service_thread_name: str = "switchyard-service"

    # Events
    event_thread_name: str = "switchyard-main"

    def __post_init__(self) -> None:
        if self.default_timeout <= 0:
            msg = f"default_timeout must be positive, got {self.default_timeout!r}"
            raise ConfigurationError(msg)
        if self.max_workers is not None and self.max_workers < 1:
            msg = f"max_workers must be at least 1, got {self.max_workers!r}"
            raise ConfigurationError(msg)
        for scheme in self.schemes:
            if not isinstance(scheme, str) or not scheme:
                msg = f"URL schemes must be non-empty strings, got {scheme!r}"
                raise ConfigurationError(msg)

    @property
    def all_schemes(self) -> frozenset[str]:
        """Every routable scheme, lowercased."""
        return frozenset(s.lower() for s in (*DEFAULT_SCHEMES, *self.schemes))

    def with_schemes(self, schemes: Iterable[str]) -> "HubConfig":
        """Return a copy with extra schemes appended."""
        merged = tuple(dict.fromkeys((*self.schemes, *schemes)))
        return replace(self, schemes=merged)

    @classmethod
    def from_manifest(cls, path: str | Path, **overrides: Any) -> "HubConfig":
        """Load app-declared URL schemes from a TOML manifest.

        The manifest lists URL types the application answers to::

            [[url_types]]
            name = "main"
            schemes = ["myapp", "myapp-beta"]

        An optional ``[switchyard]`` table may set ``default_timeout``,
        ``max_workers`` and ``label_hosts``. Keyword overrides win.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as exc:
            msg = f"Cannot read manifest {str(path)!r}: {exc}"
            raise ConfigurationError(msg) from exc
        except tomllib.TOMLDecodeError as exc:
            msg = f"Manifest {str(path)!r} is not valid TOML: {exc}"
            raise ConfigurationError(msg) from exc

        schemes: list[str] = []
        url_types = data.get("url_types", [])
        if not isinstance(url_types, list):
            msg = f"Manifest {str(path)!r}: 'url_types' must be an array of tables"
            raise ConfigurationError(msg)
        for entry in url_types:
            if not isinstance(entry, Mapping):
                msg = f"Manifest {str(path)!r}: each url_types entry must be a table"
                raise ConfigurationError(msg)
            entry_schemes = entry.get("schemes", [])
            if not isinstance(entry_schemes, list):
                msg = f"Manifest {str(path)!r}: 'schemes' must be a list of strings"
                raise ConfigurationError(msg)
            schemes.extend(entry_schemes)

        settings = dict(data.get("switchyard", {}))
        settings.update(overrides)
        settings["schemes"] = tuple(schemes) + tuple(settings.get("schemes", ()))
        try:
            return cls(**settings)
        except TypeError as exc:
            msg = f"Manifest {str(path)!r}: {exc}"
            raise ConfigurationError(msg) from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HubConfig":
        """Build a config from ``SWITCHYARD_*`` environment variables.

        - ``SWITCHYARD_SCHEMES``: comma-separated custom schemes
        - ``SWITCHYARD_TIMEOUT``: default request timeout in seconds
        - ``SWITCHYARD_WORKERS``: service worker count
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        raw_schemes = env.get("SWITCHYARD_SCHEMES", "")
        schemes = tuple(s.strip() for s in raw_schemes.split(",") if s.strip())
        if schemes:
            kwargs["schemes"] = schemes

        try:
            if "SWITCHYARD_TIMEOUT" in env:
                kwargs["default_timeout"] = float(env["SWITCHYARD_TIMEOUT"])
            if "SWITCHYARD_WORKERS" in env:
                kwargs["max_workers"] = int(env["SWITCHYARD_WORKERS"])
        except ValueError as exc:
            msg = f"Invalid SWITCHYARD_* environment value: {exc}"
            raise ConfigurationError(msg) from exc

        return cls(**kwargs)
