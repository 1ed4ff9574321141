"""Switchyard — in-process URL routing, service dispatch, and events.

Routes app URLs to handlers, pages, or named providers, and fans named
events out to subscribers on their own executors.

Basic usage::

    from switchyard import Hub, HubConfig

    hub = Hub(HubConfig(schemes=("myapp",)))

    @hub.route("user/settings")
    def settings(path, parameters):
        return True

    hub.open("myapp://user/settings?tab=privacy")

Providers::

    from switchyard import ActionProvider, action

    class UserProvider(ActionProvider):
        name = "user"

        @action("profile")
        def profile(self, request):
            return {"id": request.parameters.get("id")}

    hub.register_provider(UserProvider())
    hub.request("myapp://user/profile?id=42").unwrap()
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "ActionProvider",
    "ConfigurationError",
    "ErrorCode",
    "Event",
    "EventBus",
    "Hub",
    "HubConfig",
    "Page",
    "PageMethod",
    "PagePresenter",
    "Provider",
    "Request",
    "Response",
    "Router",
    "Service",
    "ServiceError",
    "SwitchyardError",
    "URLParser",
    "action",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "Hub":
        from switchyard.hub import Hub

        return Hub

    if name == "HubConfig":
        from switchyard.config import HubConfig

        return HubConfig

    if name in ("Request", "Response"):
        from switchyard.service import request as _request

        return getattr(_request, name)

    if name in ("ActionProvider", "Provider", "action"):
        from switchyard.service import provider as _provider

        return getattr(_provider, name)

    if name == "Service":
        from switchyard.service.dispatcher import Service

        return Service

    if name in ("Event", "EventBus"):
        from switchyard.events import bus as _bus

        return getattr(_bus, name)

    if name in ("Page", "PageMethod", "PagePresenter"):
        from switchyard.routing import page as _page

        return getattr(_page, name)

    if name == "Router":
        from switchyard.routing.router import Router

        return Router

    if name == "URLParser":
        from switchyard.routing.urls import URLParser

        return URLParser

    if name in ("ConfigurationError", "ErrorCode", "ServiceError", "SwitchyardError"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
