"""EventBus — named events fanned out to handlers on executors.

Each handler is boxed with the executor it runs on. Boxes live in a
per-event set, so registering the same handler on the same executor
twice is a no-op. Box identity is the handler's own equality: plain
functions compare by identity, bound methods by (target, function).

Free-threading safety:
    - Event and HandlerBox are frozen dataclasses (immutable, safe to share)
    - ``_boxes`` is guarded by a non-reentrant Lock; ``post`` snapshots
      under the lock and schedules outside it
    - Handlers may call back into the bus: they run on executors, never
      while the lock is held
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, ClassVar, Self

from switchyard._internal.types import EventHandler
from switchyard.errors import ConfigurationError

logger = logging.getLogger("switchyard.events")


@dataclass(frozen=True, slots=True)
class Event:
    """An opaque event name. Compares and hashes by its string."""

    name: str

    DEFAULT: ClassVar["Event"]

    def __str__(self) -> str:
        return self.name


Event.DEFAULT = Event("default")


def _event(event: "Event | str") -> Event:
    return event if isinstance(event, Event) else Event(event)


@dataclass(frozen=True, slots=True)
class HandlerBox:
    """A handler paired with the executor it is delivered on.

    ``executor=None`` means the bus's default executor.
    """

    handler: EventHandler
    executor: Executor | None = None


def _log_failure(future: Future[Any]) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Event handler failed", exc_info=exc)


class EventBus:
    """Publish/subscribe hub keyed by ``Event``.

    Usage::

        bus = EventBus()

        def on_login(event, payload):
            print(event, payload)

        bus.register("login", on_login)
        bus.post("login", {"user": "ada"})
    """

    def __init__(
        self,
        executor: Executor | None = None,
        *,
        thread_name: str = "switchyard-main",
    ) -> None:
        self._boxes: dict[Event, set[HandlerBox]] = {}
        self._lock = threading.Lock()
        self._executor = executor
        self._owns_executor = executor is None
        self._closed = False
        self._thread_name = thread_name

    @property
    def executor(self) -> Executor:
        """The default delivery context, a serial executor unless supplied."""
        with self._lock:
            self._check_open()
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1,
                    thread_name_prefix=self._thread_name,
                )
            return self._executor

    # -- Registration -----------------------------------------------------

    def register(
        self,
        event: Event | str,
        handler: EventHandler,
        executor: Executor | None = None,
    ) -> None:
        """Deliver ``event`` to ``handler`` on ``executor``."""
        self._add(_event(event), HandlerBox(handler, executor))

    def register_target(
        self,
        event: Event | str,
        target: object,
        action: str,
        executor: Executor | None = None,
    ) -> bool:
        """Deliver ``event`` to ``target.<action>(event, payload)``.

        Returns False without registering if ``target`` has no callable
        ``action`` attribute.
        """
        handler = getattr(target, action, None)
        if not callable(handler):
            logger.debug("%r has no callable %r, not registered", target, action)
            return False
        self._add(_event(event), HandlerBox(handler, executor))
        return True

    def subscribe(
        self,
        event: Event | str,
        executor: Executor | None = None,
    ) -> Callable[[EventHandler], EventHandler]:
        """Decorator form of ``register``."""

        def decorator(handler: EventHandler) -> EventHandler:
            self.register(event, handler, executor)
            return handler

        return decorator

    def _add(self, event: Event, box: HandlerBox) -> None:
        try:
            hash(box)
        except TypeError as exc:
            msg = (
                f"Event handler {box.handler!r} is unhashable; "
                "give its class a __hash__ or register a function or bound method"
            )
            raise ConfigurationError(msg) from exc
        with self._lock:
            self._boxes.setdefault(event, set()).add(box)

    # -- Deregistration ---------------------------------------------------

    def deregister(self, event: Event | str, handler: EventHandler | None = None) -> None:
        """Remove ``handler`` from ``event``, or every handler when omitted."""
        event = _event(event)
        with self._lock:
            if handler is None:
                self._boxes.pop(event, None)
                return
            self._discard(event, handler)

    def deregister_target(
        self,
        target: object,
        action: str,
        event: Event | str | None = None,
    ) -> None:
        """Remove ``target.<action>`` from ``event``, or from every event."""
        handler = getattr(target, action, None)
        if not callable(handler):
            return
        if event is not None:
            self.deregister(event, handler)
        else:
            self.deregister_handler(handler)

    def deregister_handler(self, handler: EventHandler) -> None:
        """Remove ``handler`` from every event."""
        with self._lock:
            for event in list(self._boxes):
                self._discard(event, handler)

    def _discard(self, event: Event, handler: EventHandler) -> None:
        boxes = self._boxes.get(event)
        if not boxes:
            return
        boxes.difference_update([box for box in boxes if box.handler == handler])
        if not boxes:
            del self._boxes[event]

    # -- Introspection ----------------------------------------------------

    def handlers(self, event: Event | str) -> frozenset[HandlerBox]:
        """Snapshot of the boxes registered for ``event``."""
        with self._lock:
            return frozenset(self._boxes.get(_event(event), ()))

    @property
    def events(self) -> frozenset[Event]:
        with self._lock:
            return frozenset(self._boxes)

    # -- Delivery ---------------------------------------------------------

    def post(
        self,
        event: Event | str,
        payload: Any = None,
        executor: Executor | None = None,
    ) -> list[Future[None]]:
        """Schedule every handler of ``event`` with ``(event, payload)``.

        ``executor`` overrides each box's own executor. Returns one future
        per scheduled handler, ``[]`` when nobody listens.

        Raises RuntimeError once ``close()`` has shut the bus's own
        executor down.
        """
        event = _event(event)
        with self._lock:
            self._check_open()
            boxes = list(self._boxes.get(event, ()))
        if not boxes:
            return []

        futures: list[Future[None]] = []
        for box in boxes:
            target = executor or box.executor or self.executor
            future = target.submit(box.handler, event, payload)
            future.add_done_callback(_log_failure)
            futures.append(future)
        return futures

    # -- Lifecycle --------------------------------------------------------

    def close(self, *, wait: bool = True) -> None:
        """Shut the default executor down if the bus created it.

        A bus running on a supplied executor keeps delivering; the caller
        owns that executor's lifetime.
        """
        if not self._owns_executor:
            return
        with self._lock:
            self._closed = True
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def _check_open(self) -> None:
        if self._closed:
            msg = "EventBus is closed"
            raise RuntimeError(msg)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
