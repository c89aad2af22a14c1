"""
In-process event bus for completion events.

Events are dispatched off the caller's thread on single-thread executors
partitioned by user id, so reactions for one user run in publish order while
different users proceed in parallel. Handler failures are logged and never
reach the publisher.
"""
import contextlib
import threading
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, Dict, List, Type

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

EventHandler = Callable[[Any], Any]


class EventBus:
    def __init__(self, workers: int = None, synchronous: bool = False):
        self.synchronous = synchronous
        self._workers = max(1, workers or settings.EVENT_WORKERS)
        self._handlers: Dict[Type, List[EventHandler]] = defaultdict(list)
        self._lock = threading.Lock()
        self._pending = 0
        self._executors = [
            ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"events-{i}")
            for i in range(self._workers)
        ]

    def subscribe(self, event_type: Type, handler: EventHandler) -> Callable[[], None]:
        with self._lock:
            self._handlers[event_type].append(handler)

        def _unsubscribe() -> None:
            with self._lock, contextlib.suppress(ValueError):
                self._handlers[event_type].remove(handler)

        return _unsubscribe

    def publish(self, event: Any) -> None:
        """Call only after the write that produced event has been committed."""
        if self.synchronous:
            self._dispatch(event)
            return
        with self._lock:
            self._pending += 1
        self._partition(event.user_id).submit(self._run, event)

    def flush(self, timeout: float = 10.0) -> None:
        """Blocks until the queues are empty, including events published by handlers."""
        deadline = time.monotonic() + timeout
        while True:
            remaining = deadline - time.monotonic()
            futures = [ex.submit(lambda: None) for ex in self._executors]
            wait(futures, timeout=max(0.0, remaining))
            with self._lock:
                if self._pending == 0:
                    return
            if time.monotonic() >= deadline:
                logger.warning("Event bus flush timed out", pending=self._pending)
                return

    def shutdown(self, wait_for_pending: bool = True) -> None:
        for ex in self._executors:
            ex.shutdown(wait=wait_for_pending)

    # ──── Private helpers ─────────────────────────────────────────────────────
    def _partition(self, user_id: int) -> ThreadPoolExecutor:
        return self._executors[user_id % self._workers]

    def _run(self, event: Any) -> None:
        try:
            self._dispatch(event)
        finally:
            with self._lock:
                self._pending -= 1

    def _dispatch(self, event: Any) -> None:
        with self._lock:
            handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Event handler failed",
                    event_type=type(event).__name__,
                    handler=getattr(handler, "__name__", repr(handler)),
                    user_id=getattr(event, "user_id", None),
                )


event_bus = EventBus()
