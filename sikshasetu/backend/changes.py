# sikshasetu/backend/changes.py
from __future__ import annotations

import logging
import threading
from typing import Generic, List, Callable, TypeVar

log = logging.getLogger(__name__)

E = TypeVar("E")


class ChangeHub(Generic[E]):
    """
    In-process topic. Handlers run synchronously in the publisher's thread,
    after the publisher has committed. A failing handler is logged and does
    not affect the writer or the other handlers.
    """

    def __init__(self, topic: str):
        self.topic = topic
        self._handlers: List[Callable[[E], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Callable[[E], None]) -> Callable[[], None]:
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def publish(self, event: E) -> None:
        with self._lock:
            handlers = list(self._handlers)

        for h in handlers:
            try:
                h(event)
            except Exception:
                log.exception("change handler failed", extra={"topic": self.topic})

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)
