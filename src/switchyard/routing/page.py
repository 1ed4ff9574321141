"""Page descriptors and the presenter boundary.

Switchyard does not build or animate screens. A ``Page`` only describes
what to show and how; the UI layer supplies a ``PagePresenter`` that
knows the current top-most screen and performs the transition.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class PageMethod(Enum):
    """How a page is brought on (or off) screen."""

    PUSH = "push"
    PRESENT = "present"
    POP = "pop"
    DISMISS = "dismiss"


@dataclass(frozen=True, slots=True)
class Page:
    """A routable screen.

    ``target`` is whatever the presenter understands: a screen class,
    a storyboard identifier, a widget factory.
    """

    target: Any
    parameters: Mapping[str, Any] = field(default_factory=dict)
    method: PageMethod = PageMethod.PUSH

    def with_parameters(self, parameters: Mapping[str, Any]) -> "Page":
        """Return a copy with ``parameters`` merged over the defaults."""
        if not parameters:
            return self
        return replace(self, parameters={**self.parameters, **parameters})


@runtime_checkable
class PagePresenter(Protocol):
    """UI-layer capability: show ``page`` against the top-most screen."""

    def show(self, page: Page) -> bool: ...
