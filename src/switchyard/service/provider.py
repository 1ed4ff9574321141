"""Provider protocol and a decorator-based base class.

A provider is a named, stateless capability: it advertises the actions
it supports, executes requests for them, and accepts a best-effort
cancel hook when a non-blocking dispatch times out.

Any object with the right shape satisfies ``Provider``. ``ActionProvider``
builds one from decorated methods::

    class UserProvider(ActionProvider):
        name = "user"

        @action("profile")
        def profile(self, request: Request) -> dict[str, str]:
            return {"id": request.parameters["id"]}
"""

from collections.abc import Callable, Collection
from typing import Any, ClassVar, Protocol, runtime_checkable

from switchyard.service.request import Request, Response


@runtime_checkable
class Provider(Protocol):
    """Shape the Service needs from a registered provider."""

    name: str
    actions: Collection[str]

    def execute(self, request: Request) -> Response: ...

    def cancel(self, request: Request) -> None: ...


_ACTION_ATTR = "__switchyard_action__"


def action(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark an ``ActionProvider`` method as the handler for ``name``."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _ACTION_ATTR, name)
        return func

    return decorator


class ActionProvider:
    """Base class that maps ``@action`` methods to provider actions.

    Actions are collected once per subclass. A method may return a
    ``Response`` directly; any other value becomes ``Response.data``.
    """

    name: ClassVar[str] = ""
    actions: ClassVar[frozenset[str]] = frozenset()
    _action_methods: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        methods = dict(cls._action_methods)
        for attr_name, value in vars(cls).items():
            action_name = getattr(value, _ACTION_ATTR, None)
            if action_name is not None:
                methods[action_name] = attr_name
        cls._action_methods = methods
        cls.actions = frozenset(methods)

    def execute(self, request: Request) -> Response:
        method = getattr(self, self._action_methods[request.action])
        result = method(request)
        if isinstance(result, Response):
            return result
        return Response(request, data=result)

    def cancel(self, request: Request) -> None:
        """Called when a non-blocking dispatch of ``request`` times out."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} actions={sorted(self.actions)}>"
