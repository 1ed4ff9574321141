"""Switchyard exception hierarchy.

Shared across the URL parser, Service, EventBus, and Router so every
module raises and reports the same types.

Dispatch never raises ``ServiceError``. Instances ride on
``Response.error`` and callers decide whether to raise them
(``Response.unwrap()``).
"""

from dataclasses import dataclass
from enum import Enum


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when hub configuration or a registration is invalid.

    Typically surfaces at startup: a bad manifest, a non-positive
    timeout, or a route target that is neither a handler nor a page.
    """


class ErrorCode(Enum):
    """Stable identifiers for dispatch failures."""

    MISS_PROVIDER = "missProvider"
    MISS_ACTION = "missAction"
    CANCELED = "canceled"
    TIMEOUT = "timeout"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class ServiceError(SwitchyardError):
    """A typed dispatch failure carried on a ``Response``.

    Produced by ``Service`` for lookups that miss, cancellations,
    timeouts, and requests that cannot be parsed.
    """

    code: ErrorCode
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.code.value}: {self.detail}"
        return self.code.value


class MissingProvider(ServiceError):
    """No provider is registered under the requested name."""

    def __init__(self, detail: str = "provider unregistered.") -> None:
        super().__init__(code=ErrorCode.MISS_PROVIDER, detail=detail)


class MissingAction(ServiceError):
    """The provider exists but does not support the requested action."""

    def __init__(self, detail: str = "provider action unsupported.") -> None:
        super().__init__(code=ErrorCode.MISS_ACTION, detail=detail)


class Canceled(ServiceError):  # noqa: N818
    """The request was canceled by the caller."""

    def __init__(self, detail: str = "request was canceled.") -> None:
        super().__init__(code=ErrorCode.CANCELED, detail=detail)


class Timeout(ServiceError):  # noqa: N818
    """The request did not complete before its deadline."""

    def __init__(self, detail: str = "request timeout.") -> None:
        super().__init__(code=ErrorCode.TIMEOUT, detail=detail)


class InvalidRequest(ServiceError):
    """The URL or request could not be turned into a dispatch."""

    def __init__(self, detail: str = "invalid request.") -> None:
        super().__init__(code=ErrorCode.INVALID, detail=detail)
