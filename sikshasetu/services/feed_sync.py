# sikshasetu/services/feed_sync.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor
from typing import Callable, List, Optional

from sikshasetu.backend.base import ChangeEvent, CollaboratorError, PostRecord, PostStore, Unsubscribe
from sikshasetu.core.errors import AppError

log = logging.getLogger(__name__)


def _feed_order(posts: List[PostRecord]) -> List[PostRecord]:
    return sorted(posts, key=lambda p: (p.created_at, p.id), reverse=True)


class FeedSynchronizer:
    """
    Keeps an in-memory copy of the ordered post list.

    Any change notification triggers a full refetch; the event payload is
    ignored. Triggers that arrive while a fetch is running only mark the
    feed dirty, and the running worker performs exactly one more fetch once
    it finishes. With an executor the fetch runs off the notifying thread.
    """

    def __init__(
        self,
        fetch: Callable[[], List[PostRecord]],
        *,
        executor: Optional[Executor] = None,
    ):
        self._fetch = fetch
        self._executor = executor

        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)

        self._posts: List[PostRecord] = []
        self._pending = False
        self._in_flight = False
        self._running = False
        self._unsubscribe: Optional[Unsubscribe] = None

        self.refresh_count = 0
        self.loaded = False

    # ─────────────────────────────────────────────
    # LIFECYCLE
    # ─────────────────────────────────────────────

    def start(self, store: PostStore) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
        self._unsubscribe = store.on_change(self.notify)
        self.notify(None)

    def stop(self) -> None:
        with self._lock:
            self._running = False
            self._pending = False
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    # ─────────────────────────────────────────────
    # TRIGGERS
    # ─────────────────────────────────────────────

    def notify(self, event: Optional[ChangeEvent] = None) -> None:
        with self._lock:
            if not self._running:
                return
            self._pending = True
            if self._in_flight:
                return
            self._in_flight = True

        if self._executor is not None:
            self._executor.submit(self._drain)
        else:
            self._drain()

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._pending or not self._running:
                    self._in_flight = False
                    self._idle.notify_all()
                    return
                self._pending = False

            try:
                posts = self._fetch()
            except (CollaboratorError, AppError):
                log.exception("feed refresh failed; keeping previous snapshot")
                continue

            with self._lock:
                # a fetch finishing after stop() is dropped
                if self._running:
                    self._posts = _feed_order(list(posts))
                    self.refresh_count += 1
                    self.loaded = True

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        with self._lock:
            return self._idle.wait_for(lambda: not self._in_flight, timeout=timeout)

    # ─────────────────────────────────────────────
    # READS / LOCAL WRITES
    # ─────────────────────────────────────────────

    def snapshot(self) -> List[PostRecord]:
        with self._lock:
            return list(self._posts)

    def insert_local(self, post: PostRecord) -> bool:
        """
        Optimistic insert right after a successful create. No-op if the
        post already arrived through a refresh.
        """
        with self._lock:
            if any(p.id == post.id for p in self._posts):
                return False
            self._posts = _feed_order(self._posts + [post])
            return True
