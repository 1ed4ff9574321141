"""URL router — path table of handlers and pages, with service fallback.

``open(url)`` resolves in three steps:

1. The URL's path is looked up in the route table. A page is handed to
   the presenter; a handler is called with ``(path, parameters)``.
2. Otherwise, a ``provider/action`` URL is dispatched through
   ``Service.sync`` and the open counts as handled.
3. Otherwise the URL is not routable.
"""

import logging
import threading
from collections.abc import Callable

from switchyard._internal.types import RouteHandler
from switchyard.errors import ConfigurationError
from switchyard.routing.page import Page, PagePresenter
from switchyard.routing.urls import URLParser, normalize_path
from switchyard.service.dispatcher import Service

logger = logging.getLogger("switchyard.routing")

RouteTarget = RouteHandler | Page


class Router:
    """Exact-match route table keyed by normalized path.

    Usage::

        router = Router(parser, service)
        router.register("user/settings", lambda path, params: True)
        router.register("user/profile", Page(ProfileScreen))
        router.open("myapp://user/settings?tab=privacy")
    """

    __slots__ = ("_lock", "_routes", "parser", "presenter", "service")

    def __init__(
        self,
        parser: URLParser,
        service: Service,
        presenter: PagePresenter | None = None,
    ) -> None:
        self.parser = parser
        self.service = service
        self.presenter = presenter
        self._routes: dict[str, RouteTarget] = {}
        self._lock = threading.Lock()

    def register(self, path: str, target: RouteTarget) -> None:
        """Route ``path`` to a handler or a page, replacing any previous entry."""
        if not isinstance(target, Page) and not callable(target):
            msg = (
                f"Route target for {path!r} must be a Page or a callable "
                f"(path, parameters) -> bool, got {type(target).__name__}"
            )
            raise ConfigurationError(msg)
        key = normalize_path(path)
        if not key:
            msg = f"Route path {path!r} has no segments"
            raise ConfigurationError(msg)
        with self._lock:
            self._routes[key] = target
        logger.debug("Registered route %r -> %r", key, target)

    def deregister(self, path: str) -> None:
        """Remove the route at ``path``, if any."""
        with self._lock:
            self._routes.pop(normalize_path(path), None)

    def route(self, path: str) -> Callable[[RouteHandler], RouteHandler]:
        """Decorator form of ``register`` for handlers."""

        def decorator(handler: RouteHandler) -> RouteHandler:
            self.register(path, handler)
            return handler

        return decorator

    @property
    def routes(self) -> dict[str, RouteTarget]:
        """Snapshot of the route table."""
        with self._lock:
            return dict(self._routes)

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return normalize_path(path) in self._routes

    def open(self, url: str) -> bool:
        """Route ``url``. Returns whether anything handled it."""
        resolved = self.parser.router_parameters(url)
        if resolved is not None:
            path, parameters = resolved
            with self._lock:
                target = self._routes.get(path)
            if isinstance(target, Page):
                return self._show(target.with_parameters(parameters))
            if target is not None:
                return bool(target(path, parameters))

        request = self.parser.service_request(url)
        if request is not None:
            response = self.service.sync(request)
            if response.error is not None:
                logger.warning("Service dispatch for %r failed: %s", url, response.error)
            return True

        logger.debug("No route for %r", url)
        return False

    def _show(self, page: Page) -> bool:
        if self.presenter is None:
            logger.debug("No presenter configured, cannot show %r", page)
            return False
        return bool(self.presenter.show(page))
