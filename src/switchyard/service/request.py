"""Request and Response frozen dataclasses.

Free-threading safety:
    - Request and Response are frozen (immutable, safe to share)
    - Request ids come from a lock-guarded counter, never reused
"""

import itertools
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from switchyard._internal.types import Value
from switchyard.errors import ServiceError

_id_lock = threading.Lock()
_id_counter = itertools.count(1)


def next_request_id() -> int:
    """Return the next process-wide request id."""
    with _id_lock:
        return next(_id_counter)


@dataclass(frozen=True, slots=True)
class Request:
    """A single dispatch attempt against a provider action.

    Usage::

        request = Request("user", "profile", parameters={"id": "42"}, timeout=1.0)
        response = hub.service.sync(request)
    """

    provider: str
    action: str
    path: str = ""
    timeout: float = 5.0
    parameters: Mapping[str, Value] = field(default_factory=dict)
    id: int = field(default_factory=next_request_id, init=False)

    def __str__(self) -> str:
        return (
            f"id:{self.id} provider:{self.provider} action:{self.action} "
            f"path:{self.path} timeout:{self.timeout} parameters:{dict(self.parameters)}"
        )


@dataclass(frozen=True, slots=True)
class Response:
    """Result of executing, canceling, or timing out a Request.

    ``request`` is ``None`` only when no request could be built (an
    unparseable URL).
    """

    request: Request | None
    data: Any = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return ``data``, raising ``error`` if one is set."""
        if self.error is not None:
            raise self.error
        return self.data
