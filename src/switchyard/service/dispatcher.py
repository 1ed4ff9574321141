"""Service — provider registry with sync, async and awaitable dispatch.

The registry maps provider names to providers. Dispatch runs on a
dedicated ``ThreadPoolExecutor`` whose worker threads are tagged, so a
provider that calls ``sync()`` from inside its own action runs inline
instead of waiting on the pool it occupies.

Free-threading safety:
    - ``_providers`` is guarded by a Lock on every read and write
    - Provider code runs outside the lock
    - Each non-blocking dispatch owns a ``_Delivery`` gate: completion
      and timeout both claim it, only the first claim delivers
    - Timeouts share one ``DeadlineScheduler`` thread per Service
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Self

import anyio
import anyio.to_thread

from switchyard._internal.types import Completion
from switchyard.config import HubConfig
from switchyard.errors import (
    Canceled,
    InvalidRequest,
    MissingAction,
    MissingProvider,
    Timeout,
)
from switchyard.routing.urls import URLParser
from switchyard.service.deadlines import DeadlineScheduler
from switchyard.service.provider import Provider
from switchyard.service.request import Request, Response

logger = logging.getLogger("switchyard.service")


class _Delivery:
    """Single-use gate deciding which side of a race delivers."""

    __slots__ = ("_claimed", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claimed = False

    def claim(self) -> bool:
        with self._lock:
            if self._claimed:
                return False
            self._claimed = True
            return True


class Service:
    """Provider registry and dispatcher.

    Usage::

        service = Service()
        service.register(UserProvider())
        response = service.sync(Request("user", "profile"))
        service.async_(Request("user", "profile", timeout=1.0), print)
    """

    def __init__(
        self,
        config: HubConfig | None = None,
        *,
        parser: URLParser | None = None,
    ) -> None:
        self.config = config or HubConfig()
        self.parser = parser or URLParser(
            self.config.schemes,
            label_hosts=self.config.label_hosts,
            default_timeout=self.config.default_timeout,
        )
        self._providers: dict[str, Provider] = {}
        self._lock = threading.Lock()
        self._local = threading.local()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=self.config.service_thread_name,
            initializer=self._mark_worker,
        )
        self._deadlines = DeadlineScheduler(name=f"{self.config.service_thread_name}-deadlines")

    # -- Registry ---------------------------------------------------------

    def register(self, provider: Provider) -> bool:
        """Register ``provider`` under its name.

        Returns False, leaving the registry untouched, if the name is taken.
        """
        name = provider.name
        with self._lock:
            if name in self._providers:
                logger.debug("Provider %r already registered", name)
                return False
            self._providers[name] = provider
        logger.debug("Registered provider %r with actions %s", name, sorted(provider.actions))
        return True

    def deregister(self, name: str) -> None:
        """Remove the provider registered as ``name``, if any."""
        with self._lock:
            removed = self._providers.pop(name, None)
        if removed is not None:
            logger.debug("Deregistered provider %r", name)

    def get(self, name: str) -> Provider | None:
        """Look up a provider by name. Returns ``None`` if not found."""
        with self._lock:
            return self._providers.get(name)

    @property
    def providers(self) -> dict[str, Provider]:
        """Snapshot of the registry."""
        with self._lock:
            return dict(self._providers)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    # -- Dispatch ---------------------------------------------------------

    def execute(self, request: Request) -> Response:
        """Run ``request`` on the calling thread."""
        provider = self.get(request.provider)
        if provider is None:
            return Response(request, error=MissingProvider())
        if request.action not in provider.actions:
            return Response(request, error=MissingAction())
        return provider.execute(request)

    def cancel(self, request: Request) -> Response:
        """Answer ``request`` as canceled.

        Does not stop work already in flight and does not call the
        provider's cancel hook.
        """
        return Response(request, error=Canceled())

    def open(self, url: str) -> Response:
        """Parse ``url`` as a service request and execute it inline."""
        request = self.parser.service_request(url)
        if request is None:
            return Response(None, error=InvalidRequest(f"not a service URL: {url!r}"))
        return self.execute(request)

    def sync(self, request: Request) -> Response:
        """Execute on the worker pool and block until the response is ready.

        Runs inline when already on a service worker thread.
        """
        if self._on_worker():
            return self.execute(request)
        return self._executor.submit(self.execute, request).result()

    def async_(self, request: Request, on_complete: Completion) -> None:
        """Execute on the worker pool without blocking the caller.

        ``on_complete`` is called exactly once: with the provider's
        response, or with a ``Timeout`` response if ``request.timeout``
        elapses first. On timeout the provider's cancel hook runs before
        delivery.
        """
        gate = _Delivery()

        def on_timeout() -> None:
            if not gate.claim():
                return
            logger.debug("Request %d timed out after %ss", request.id, request.timeout)
            self._cancel_provider(request)
            self._deliver(on_complete, Response(request, error=Timeout()))

        def run() -> None:
            try:
                response = self.execute(request)
            except Exception:
                logger.exception("Provider %r raised during request %d", request.provider, request.id)
                response = Response(request, error=InvalidRequest("provider raised an exception."))
            if not gate.claim():
                return
            deadline.cancel()
            self._deliver(on_complete, response)

        deadline = self._deadlines.call_later(request.timeout, on_timeout)
        self._executor.submit(run)

    submit = async_

    async def call(self, request: Request) -> Response:
        """Await ``request`` on an anyio worker thread, bounded by its timeout.

        On timeout the provider's cancel hook runs and a ``Timeout``
        response is returned. The abandoned worker thread finishes on
        its own; its result is discarded.
        """
        with anyio.move_on_after(request.timeout):
            return await anyio.to_thread.run_sync(self.execute, request, abandon_on_cancel=True)
        logger.debug("Request %d timed out after %ss", request.id, request.timeout)
        self._cancel_provider(request)
        return Response(request, error=Timeout())

    # -- Lifecycle --------------------------------------------------------

    def close(self, *, wait: bool = True) -> None:
        """Shut the worker pool and the deadline thread down."""
        self._executor.shutdown(wait=wait)
        self._deadlines.close(wait=wait)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Internals --------------------------------------------------------

    def _mark_worker(self) -> None:
        self._local.owner = self

    def _on_worker(self) -> bool:
        return getattr(self._local, "owner", None) is self

    def _cancel_provider(self, request: Request) -> None:
        provider = self.get(request.provider)
        if provider is None:
            return
        try:
            provider.cancel(request)
        except Exception:
            logger.exception("Cancel hook of provider %r failed", request.provider)

    @staticmethod
    def _deliver(on_complete: Callable[[Response], None], response: Response) -> None:
        try:
            on_complete(response)
        except Exception:
            logger.exception("Completion callback failed for request %s", response.request)
