"""Hub — one parser, service, event bus, and router sharing a config.

The hub replaces process-wide registries with an explicit object the
application creates at startup and passes around. Tests build a fresh
hub each time.

Usage::

    hub = Hub(HubConfig(schemes=("myapp",)))
    hub.register_provider(UserProvider())

    @hub.route("user/settings")
    def settings(path, parameters):
        return True

    @hub.on("login")
    def greet(event, payload):
        ...

    hub.open("myapp://user/settings")
    hub.open("myapp://user/profile?id=42")  # falls through to the service
"""

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future
from typing import Any, Self

from switchyard._internal.types import EventHandler, RouteHandler
from switchyard.config import HubConfig
from switchyard.events.bus import Event, EventBus
from switchyard.routing.page import Page, PagePresenter
from switchyard.routing.router import Router
from switchyard.routing.urls import URLParser
from switchyard.service.dispatcher import Service
from switchyard.service.provider import Provider
from switchyard.service.request import Response

logger = logging.getLogger("switchyard")


class Hub:
    """Application communication context."""

    __slots__ = ("bus", "config", "parser", "router", "service")

    def __init__(
        self,
        config: HubConfig | None = None,
        *,
        presenter: PagePresenter | None = None,
        event_executor: Executor | None = None,
    ) -> None:
        self.config = config or HubConfig()
        self.parser = URLParser(
            self.config.schemes,
            label_hosts=self.config.label_hosts,
            default_timeout=self.config.default_timeout,
        )
        self.service = Service(self.config, parser=self.parser)
        self.bus = EventBus(event_executor, thread_name=self.config.event_thread_name)
        self.router = Router(self.parser, self.service, presenter)
        logger.debug("Hub ready, schemes=%s", sorted(self.parser.schemes))

    # -- Providers --------------------------------------------------------

    def register_provider(self, provider: Provider) -> bool:
        return self.service.register(provider)

    def deregister_provider(self, name: str) -> None:
        self.service.deregister(name)

    # -- Routes -----------------------------------------------------------

    def route(self, path: str) -> Callable[[RouteHandler], RouteHandler]:
        """Register the decorated function as the handler for ``path``."""
        return self.router.route(path)

    def page(self, path: str, page: Page) -> None:
        self.router.register(path, page)

    def open(self, url: str) -> bool:
        return self.router.open(url)

    def request(self, url: str) -> Response:
        """Dispatch a ``provider/action`` URL and return the real response."""
        return self.service.open(url)

    # -- Events -----------------------------------------------------------

    def on(
        self,
        event: Event | str,
        executor: Executor | None = None,
    ) -> Callable[[EventHandler], EventHandler]:
        """Subscribe the decorated function to ``event``."""
        return self.bus.subscribe(event, executor)

    def post(
        self,
        event: Event | str,
        payload: Any = None,
        executor: Executor | None = None,
    ) -> list[Future[None]]:
        return self.bus.post(event, payload, executor)

    # -- Lifecycle --------------------------------------------------------

    def close(self) -> None:
        self.bus.close()
        self.service.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
