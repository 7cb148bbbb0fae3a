# sikshasetu/backend/disabled.py
"""
Backend used when no data store is configured. Reads of the current session
report "nobody signed in"; every other call raises BackendUnavailableError
so the API can show one persistent notice instead of half-working pages.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from sikshasetu.backend.base import (
    AuthSessionInfo,
    Backend,
    ChangeHandler,
    DocumentStore,
    IdentityProvider,
    IdentityRecord,
    PostRecord,
    PostStore,
    ProfileStore,
    SessionHandler,
    StoredDocument,
    Unsubscribe,
    UserProfile,
)
from sikshasetu.core.errors import BackendUnavailableError
from sikshasetu.models.enums import PostType


def _noop() -> None:
    return None


class DisabledIdentityProvider(IdentityProvider):
    def register(self, email: str, password: str) -> IdentityRecord:
        raise BackendUnavailableError()

    def login(self, email: str, password: str) -> AuthSessionInfo:
        raise BackendUnavailableError()

    def logout(self, access_token: str) -> None:
        return None

    def current_session(self, access_token: Optional[str]) -> Optional[AuthSessionInfo]:
        return None

    def on_session_change(self, handler: SessionHandler) -> Unsubscribe:
        return _noop

    def confirm_email(self, identity_id: str) -> None:
        raise BackendUnavailableError()


class DisabledProfileStore(ProfileStore):
    def create_profile(self, profile: UserProfile) -> UserProfile:
        raise BackendUnavailableError()

    def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        raise BackendUnavailableError()

    def update_profile(self, profile_id: str, **fields) -> UserProfile:
        raise BackendUnavailableError()


class DisabledPostStore(PostStore):
    def list_posts(self) -> List[PostRecord]:
        raise BackendUnavailableError()

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        raise BackendUnavailableError()

    def create_post(self, user_id: str, post_type: PostType, fields: Dict[str, Optional[str]]) -> PostRecord:
        raise BackendUnavailableError()

    def update_post(self, post_id: str, fields: Dict[str, Optional[str]]) -> PostRecord:
        raise BackendUnavailableError()

    def delete_post(self, post_id: str) -> None:
        raise BackendUnavailableError()

    def on_change(self, handler: ChangeHandler) -> Unsubscribe:
        return _noop


class DisabledDocumentStore(DocumentStore):
    def upload(self, user_id: str, filename: str, content_type: str, data: bytes) -> StoredDocument:
        raise BackendUnavailableError()


def build_disabled_backend() -> Backend:
    return Backend(
        identity=DisabledIdentityProvider(),
        profiles=DisabledProfileStore(),
        posts=DisabledPostStore(),
        documents=DisabledDocumentStore(),
        configured=False,
    )
