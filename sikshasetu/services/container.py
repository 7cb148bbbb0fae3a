# sikshasetu/services/container.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from sikshasetu.backend.base import AuthSessionInfo, Backend
from sikshasetu.core.config import Settings
from sikshasetu.services.auth_service import AuthService
from sikshasetu.services.feed_sync import FeedSynchronizer
from sikshasetu.services.page_service import PageService
from sikshasetu.services.post_lifecycle import PostLifecycleManager
from sikshasetu.services.profile_service import ProfileService
from sikshasetu.services.verification_service import VerificationService

log = logging.getLogger(__name__)


def log_session_change(event: str, session: Optional[AuthSessionInfo]) -> None:
    log.info(
        "session change",
        extra={
            "event": event,
            "user_id": session.identity_id if session else None,
        },
    )


@dataclass
class AppServices:
    """
    Owned by the application; handlers receive it by dependency injection.
    """

    backend: Backend
    auth: AuthService
    posts: PostLifecycleManager
    profiles: ProfileService
    verification: VerificationService
    pages: PageService
    feed: Optional[FeedSynchronizer] = None
    _executor: Optional[ThreadPoolExecutor] = field(default=None, repr=False)
    _unsubscribe_session: Optional[object] = field(default=None, repr=False)

    def close(self) -> None:
        if self.feed is not None:
            self.feed.stop()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        if callable(self._unsubscribe_session):
            self._unsubscribe_session()
        self.backend.close()


def build_services(backend: Backend, settings: Settings) -> AppServices:
    feed: Optional[FeedSynchronizer] = None
    executor: Optional[ThreadPoolExecutor] = None

    if backend.configured:
        if settings.feed_background_refresh:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="feed-refresh")
        feed = FeedSynchronizer(backend.posts.list_posts, executor=executor)
        feed.start(backend.posts)

    # single subscription point for auth state changes
    unsubscribe = backend.identity.on_session_change(log_session_change)

    posts = PostLifecycleManager(backend.posts, feed)
    profiles = ProfileService()
    verification = VerificationService(backend, max_bytes=settings.verification_max_bytes)

    return AppServices(
        backend=backend,
        auth=AuthService(backend, password_min_length=settings.password_min_length),
        posts=posts,
        profiles=profiles,
        verification=verification,
        pages=PageService(posts, profiles, verification),
        feed=feed,
        _executor=executor,
        _unsubscribe_session=unsubscribe,
    )
