"""Deadline scheduler — one timer thread per Service.

Non-blocking dispatch needs a timeout for every pending request. Rather
than one ``threading.Timer`` (one OS thread) per request, a Service owns
a single ``DeadlineScheduler``: a daemon thread sleeping on a Condition
until the earliest deadline in a heap comes due.

Free-threading safety:
    - The heap and the ``_closed`` flag are guarded by the Condition's lock
    - Callbacks run on the scheduler thread, outside the lock
    - ``Deadline.cancel()`` only flips a flag; canceled entries are
      skipped when they reach the top of the heap
"""

import heapq
import itertools
import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger("switchyard.service")


class Deadline:
    """Handle for a scheduled callback."""

    __slots__ = ("callback", "canceled", "when")

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.canceled = False

    def cancel(self) -> None:
        self.canceled = True


class DeadlineScheduler:
    """Runs callbacks at monotonic deadlines on a single daemon thread.

    Usage::

        scheduler = DeadlineScheduler(name="switchyard-deadlines")
        deadline = scheduler.call_later(0.5, on_timeout)
        deadline.cancel()
        scheduler.close()

    Callbacks should be short; a slow callback delays the ones behind it.
    """

    def __init__(self, *, name: str = "switchyard-deadlines") -> None:
        self._name = name
        self._heap: list[tuple[float, int, Deadline]] = []
        self._seq = itertools.count()
        self._cond = threading.Condition()
        self._thread: threading.Thread | None = None
        self._closed = False

    def call_later(self, delay: float, callback: Callable[[], None]) -> Deadline:
        """Schedule ``callback`` to run ``delay`` seconds from now."""
        deadline = Deadline(time.monotonic() + max(delay, 0.0), callback)
        with self._cond:
            if self._closed:
                msg = "cannot schedule deadlines after close()"
                raise RuntimeError(msg)
            heapq.heappush(self._heap, (deadline.when, next(self._seq), deadline))
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()
            self._cond.notify()
        return deadline

    def __len__(self) -> int:
        with self._cond:
            return sum(1 for _, _, d in self._heap if not d.canceled)

    def close(self, *, wait: bool = True) -> None:
        """Stop the thread. Deadlines not yet due are dropped."""
        with self._cond:
            self._closed = True
            self._heap.clear()
            thread = self._thread
            self._cond.notify()
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join()

    def _next_due(self) -> Deadline | None:
        """Block until a deadline is due; ``None`` once closed."""
        with self._cond:
            while not self._closed:
                while self._heap and self._heap[0][2].canceled:
                    heapq.heappop(self._heap)
                if not self._heap:
                    self._cond.wait()
                    continue
                remaining = self._heap[0][0] - time.monotonic()
                if remaining <= 0:
                    return heapq.heappop(self._heap)[2]
                self._cond.wait(remaining)
            return None

    def _run(self) -> None:
        while (deadline := self._next_due()) is not None:
            if deadline.canceled:
                continue
            try:
                deadline.callback()
            except Exception:
                logger.exception("Deadline callback failed")
