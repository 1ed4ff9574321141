"""Shared type aliases used across switchyard modules."""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from switchyard.events.bus import Event
    from switchyard.service.request import Response

# Parameter value carried by a Request: scalars or nested structures of them
Value: TypeAlias = "str | int | float | bool | None | Sequence[Value] | Mapping[str, Value]"

# Route handler: receives (path, query parameters), returns whether it handled the URL
RouteHandler: TypeAlias = Callable[[str, dict[str, str]], bool]

# Event handler: receives (event, payload)
EventHandler: TypeAlias = Callable[["Event", Any], None]

# Completion callback for non-blocking dispatch
Completion: TypeAlias = Callable[["Response"], None]
