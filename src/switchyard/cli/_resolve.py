"""Target loading for ``switchyard routes`` and ``switchyard open``.

A target is ``"module[:attribute]"``; the attribute defaults to ``hub``.
It may name any of:

- a ``Hub``, used as is
- a ``Service``, whose providers are copied into a fresh Hub
- a ``Provider`` instance, registered on a fresh Hub
- a provider class or a zero-argument factory returning one of the above

Fresh hubs take their config from ``--manifest`` when given, else from
the Service being wrapped, else ``HubConfig()``.
"""

import importlib
import logging
from pathlib import Path

from switchyard.config import HubConfig
from switchyard.errors import ConfigurationError
from switchyard.hub import Hub
from switchyard.service.dispatcher import Service
from switchyard.service.provider import Provider

logger = logging.getLogger("switchyard.cli")


def load_hub(target: str, manifest: str | Path | None = None) -> Hub:
    """Import ``target`` and turn what it names into a Hub.

    Raises:
        ImportError: The module cannot be imported.
        AttributeError: The module has no such attribute.
        ConfigurationError: The object (or what its factory returned) is
            not a Hub, Service, or Provider, the factory raised, or the
            manifest is invalid.
    """
    module_name, _, attr = target.partition(":")
    obj = getattr(importlib.import_module(module_name), attr or "hub")
    config = HubConfig.from_manifest(manifest) if manifest else None

    hub = _coerce(obj, config)
    if hub is None and callable(obj):
        try:
            produced = obj()
        except Exception as exc:
            msg = f"{target!r} could not build a hub: {type(exc).__name__}: {exc}"
            raise ConfigurationError(msg) from exc
        hub = _coerce(produced, config)
        obj = produced

    if hub is None:
        msg = f"{target!r} is a {type(obj).__name__}; expected a Hub, Service, or Provider"
        raise ConfigurationError(msg)
    return hub


def _coerce(obj: object, config: HubConfig | None) -> Hub | None:
    if isinstance(obj, Hub):
        if config is not None:
            logger.warning("Ignoring manifest: target is already a Hub")
        return obj
    if isinstance(obj, Service):
        hub = Hub(config or obj.config)
        for provider in obj.providers.values():
            hub.register_provider(provider)
        return hub
    # Provider classes satisfy the protocol structurally; only instances count
    if not isinstance(obj, type) and isinstance(obj, Provider):
        hub = Hub(config)
        hub.register_provider(obj)
        return hub
    return None
