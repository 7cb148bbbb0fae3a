# sikshasetu/backend/base.py
"""
Collaborator contracts.

Everything the service persists goes through these interfaces: identities
and sessions, profiles, posts (with change notifications) and verification
document blobs. Two implementations exist, picked once at startup:
SqlBackend (sikshasetu.backend.sql) and DisabledBackend
(sikshasetu.backend.disabled).

Adapters raise CollaboratorError carrying the store's own message. Services
translate it; the raw text is never returned to users except through the
auth allow-list in sikshasetu.core.errors.
"""
from __future__ import annotations

import abc
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from sikshasetu.models.enums import PostType, UserRole, VerificationStatus


class CollaboratorError(Exception):
    """Opaque failure reported by a storage/identity adapter."""


Unsubscribe = Callable[[], None]


# ─────────────────────────────────────────────
# RECORDS
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    username: str
    role: UserRole
    verification_status: VerificationStatus
    created_at: Optional[datetime] = None
    bio: Optional[str] = None
    organization: Optional[str] = None
    donor_type: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.verification_status == VerificationStatus.VERIFIED


@dataclass(frozen=True)
class PostRecord:
    id: str
    user_id: str
    post_type: PostType
    created_at: datetime
    content: Optional[str] = None
    resource_title: Optional[str] = None
    resource_category: Optional[str] = None
    resource_contact: Optional[str] = None
    updated_at: Optional[datetime] = None
    author: Optional[UserProfile] = None

    def with_contact(self, contact: Optional[str]) -> "PostRecord":
        return replace(self, resource_contact=contact)


@dataclass(frozen=True)
class IdentityRecord:
    id: str
    email: str
    email_confirmed: bool = False


@dataclass(frozen=True)
class AuthSessionInfo:
    session_id: str
    identity_id: str
    email: str
    access_token: str
    expires_at: datetime


@dataclass(frozen=True)
class StoredDocument:
    id: str
    user_id: str
    storage_key: str
    filename: str
    content_type: str
    size_bytes: int


@dataclass(frozen=True)
class ChangeEvent:
    # INSERT | UPDATE | DELETE
    kind: str
    post_id: str
    table: str = "posts"


SessionHandler = Callable[[str, Optional[AuthSessionInfo]], None]
ChangeHandler = Callable[[ChangeEvent], None]


# ─────────────────────────────────────────────
# INTERFACES
# ─────────────────────────────────────────────

class IdentityProvider(abc.ABC):
    @abc.abstractmethod
    def register(self, email: str, password: str) -> IdentityRecord: ...

    @abc.abstractmethod
    def login(self, email: str, password: str) -> AuthSessionInfo: ...

    @abc.abstractmethod
    def logout(self, access_token: str) -> None: ...

    @abc.abstractmethod
    def current_session(self, access_token: Optional[str]) -> Optional[AuthSessionInfo]: ...

    @abc.abstractmethod
    def on_session_change(self, handler: SessionHandler) -> Unsubscribe: ...

    @abc.abstractmethod
    def confirm_email(self, identity_id: str) -> None: ...


class ProfileStore(abc.ABC):
    @abc.abstractmethod
    def create_profile(self, profile: UserProfile) -> UserProfile: ...

    @abc.abstractmethod
    def get_profile(self, profile_id: str) -> Optional[UserProfile]: ...

    @abc.abstractmethod
    def update_profile(self, profile_id: str, **fields) -> UserProfile: ...


class PostStore(abc.ABC):
    @abc.abstractmethod
    def list_posts(self) -> List[PostRecord]:
        """All posts, created_at desc then id desc, author joined."""

    @abc.abstractmethod
    def get_post(self, post_id: str) -> Optional[PostRecord]: ...

    @abc.abstractmethod
    def create_post(self, user_id: str, post_type: PostType, fields: Dict[str, Optional[str]]) -> PostRecord: ...

    @abc.abstractmethod
    def update_post(self, post_id: str, fields: Dict[str, Optional[str]]) -> PostRecord: ...

    @abc.abstractmethod
    def delete_post(self, post_id: str) -> None: ...

    @abc.abstractmethod
    def on_change(self, handler: ChangeHandler) -> Unsubscribe: ...


class DocumentStore(abc.ABC):
    @abc.abstractmethod
    def upload(self, user_id: str, filename: str, content_type: str, data: bytes) -> StoredDocument: ...


@dataclass
class Backend:
    identity: IdentityProvider
    profiles: ProfileStore
    posts: PostStore
    documents: DocumentStore
    configured: bool
    _closers: List[Callable[[], None]] = field(default_factory=list)

    def close(self) -> None:
        for fn in self._closers:
            fn()
        self._closers.clear()
