# sikshasetu/backend/sql.py
"""
SQLAlchemy implementation of the collaborator contracts.

Each call opens its own session. Change notifications are published only
after the write has committed, so a subscriber that refetches always sees
the new state.
"""
from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from sikshasetu.backend.base import (
    AuthSessionInfo,
    Backend,
    ChangeEvent,
    ChangeHandler,
    CollaboratorError,
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
from sikshasetu.backend.changes import ChangeHub
from sikshasetu.core.config import Settings
from sikshasetu.core.security import (
    hash_password,
    issue_session_token,
    read_session_claims,
    verify_password,
)
from sikshasetu.db.base import Base
from sikshasetu.db.session import build_engine, build_session_factory
from sikshasetu.models.enums import PostType, UserRole, VerificationStatus
from sikshasetu.models.identity import AuthSession, Identity
from sikshasetu.models.post import Post
from sikshasetu.models.profile import Profile
from sikshasetu.models.verification_document import VerificationDocument

log = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


def _profile_record(row: Profile) -> UserProfile:
    return UserProfile(
        id=row.id,
        email=row.email,
        username=row.username,
        role=UserRole(row.role),
        verification_status=VerificationStatus(row.verification_status),
        created_at=row.created_at,
        bio=row.bio,
        organization=row.organization,
        donor_type=row.donor_type,
    )


def _post_record(row: Post) -> PostRecord:
    return PostRecord(
        id=row.id,
        user_id=row.user_id,
        post_type=PostType(row.post_type),
        created_at=row.created_at,
        content=row.content,
        resource_title=row.resource_title,
        resource_category=row.resource_category,
        resource_contact=row.resource_contact,
        updated_at=row.updated_at,
        author=_profile_record(row.author) if row.author else None,
    )


# ─────────────────────────────────────────────
# IDENTITY
# ─────────────────────────────────────────────

class SqlIdentityProvider(IdentityProvider):
    def __init__(self, session_factory: sessionmaker, *, require_email_confirmation: bool = False):
        self._session_factory = session_factory
        self._require_confirmation = require_email_confirmation
        self._hub: ChangeHub = ChangeHub("auth")

    def register(self, email: str, password: str) -> IdentityRecord:
        email_norm = email.strip().lower()
        try:
            with self._session_factory() as db:
                exists = db.execute(
                    select(Identity.id).where(Identity.email == email_norm)
                ).first()
                if exists:
                    raise CollaboratorError("User already registered")

                row = Identity(email=email_norm, password_hash=hash_password(password))
                db.add(row)
                db.commit()
                return IdentityRecord(id=row.id, email=row.email, email_confirmed=False)
        except IntegrityError as e:
            raise CollaboratorError(f"duplicate key value violates unique constraint ({e.orig})") from e
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

    def login(self, email: str, password: str) -> AuthSessionInfo:
        email_norm = email.strip().lower()
        try:
            with self._session_factory() as db:
                ident = db.execute(
                    select(Identity).where(Identity.email == email_norm)
                ).scalar_one_or_none()

                if not ident or not verify_password(password, ident.password_hash):
                    raise CollaboratorError("Invalid login credentials")

                if self._require_confirmation and ident.email_confirmed_at is None:
                    raise CollaboratorError("Email not confirmed")

                sess = AuthSession(identity_id=ident.id)
                db.add(sess)
                db.commit()
                identity_id, session_id, email_out = ident.id, sess.id, ident.email
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        token, expires_at = issue_session_token(identity_id, session_id, email_out)
        info = AuthSessionInfo(
            session_id=session_id,
            identity_id=identity_id,
            email=email_out,
            access_token=token,
            expires_at=expires_at,
        )
        self._hub.publish(("SIGNED_IN", info))
        return info

    def logout(self, access_token: str) -> None:
        claims = read_session_claims(access_token)
        if claims is None:
            return

        try:
            with self._session_factory() as db:
                db.execute(
                    update(AuthSession)
                    .where(
                        AuthSession.id == claims.session_id,
                        AuthSession.revoked_at.is_(None),
                    )
                    .values(revoked_at=_now())
                )
                db.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        self._hub.publish(("SIGNED_OUT", None))

    def current_session(self, access_token: Optional[str]) -> Optional[AuthSessionInfo]:
        if not access_token:
            return None

        claims = read_session_claims(access_token)
        if claims is None:
            return None

        try:
            with self._session_factory() as db:
                row = db.get(AuthSession, claims.session_id)
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        if row is None or row.revoked_at is not None or row.identity_id != claims.identity_id:
            return None

        return AuthSessionInfo(
            session_id=claims.session_id,
            identity_id=claims.identity_id,
            email=claims.email,
            access_token=access_token,
            expires_at=claims.expires_at,
        )

    def on_session_change(self, handler: SessionHandler) -> Unsubscribe:
        return self._hub.subscribe(lambda ev: handler(*ev))

    def confirm_email(self, identity_id: str) -> None:
        try:
            with self._session_factory() as db:
                row = db.get(Identity, identity_id)
                if row is None:
                    raise CollaboratorError("User not found")
                if row.email_confirmed_at is None:
                    row.email_confirmed_at = _now()
                    db.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e


# ─────────────────────────────────────────────
# PROFILES
# ─────────────────────────────────────────────

# set only by the verification flow or out-of-band review
PROFILE_MUTABLE_FIELDS = {"verification_status"}


class SqlProfileStore(ProfileStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def create_profile(self, profile: UserProfile) -> UserProfile:
        try:
            with self._session_factory() as db:
                row = Profile(
                    id=profile.id,
                    email=profile.email,
                    username=profile.username,
                    role=profile.role.value,
                    verification_status=profile.verification_status.value,
                    bio=profile.bio,
                    organization=profile.organization,
                    donor_type=profile.donor_type,
                )
                db.add(row)
                db.commit()
                return _profile_record(row)
        except IntegrityError as e:
            raise CollaboratorError(f"duplicate key value violates unique constraint ({e.orig})") from e
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

    def get_profile(self, profile_id: str) -> Optional[UserProfile]:
        try:
            with self._session_factory() as db:
                row = db.get(Profile, profile_id)
                return _profile_record(row) if row else None
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

    def update_profile(self, profile_id: str, **fields) -> UserProfile:
        unknown = set(fields) - PROFILE_MUTABLE_FIELDS
        if unknown:
            raise CollaboratorError(f"Columns not updatable: {sorted(unknown)}")

        try:
            with self._session_factory() as db:
                row = db.get(Profile, profile_id)
                if row is None:
                    raise CollaboratorError("Profile not found")
                for k, v in fields.items():
                    setattr(row, k, v.value if hasattr(v, "value") else v)
                db.commit()
                return _profile_record(row)
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e


# ─────────────────────────────────────────────
# POSTS
# ─────────────────────────────────────────────

POST_VARIANT_FIELDS = {
    "content",
    "resource_title",
    "resource_category",
    "resource_contact",
}


class SqlPostStore(PostStore):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._hub: ChangeHub[ChangeEvent] = ChangeHub("posts")

    def list_posts(self) -> List[PostRecord]:
        try:
            with self._session_factory() as db:
                rows = db.execute(
                    select(Post).order_by(Post.created_at.desc(), Post.id.desc())
                ).scalars().all()
                return [_post_record(r) for r in rows]
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        try:
            with self._session_factory() as db:
                row = db.get(Post, post_id)
                return _post_record(row) if row else None
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

    def create_post(self, user_id: str, post_type: PostType, fields: Dict[str, Optional[str]]) -> PostRecord:
        values = {k: v for k, v in fields.items() if k in POST_VARIANT_FIELDS}
        try:
            with self._session_factory() as db:
                row = Post(user_id=user_id, post_type=post_type.value, **values)
                db.add(row)
                db.commit()
                db.refresh(row)
                rec = _post_record(row)
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        self._hub.publish(ChangeEvent(kind="INSERT", post_id=rec.id))
        return rec

    def update_post(self, post_id: str, fields: Dict[str, Optional[str]]) -> PostRecord:
        try:
            with self._session_factory() as db:
                row = db.get(Post, post_id)
                if row is None:
                    raise CollaboratorError("Post not found")
                for k in POST_VARIANT_FIELDS:
                    if k in fields:
                        setattr(row, k, fields[k])
                row.updated_at = _now()
                db.commit()
                db.refresh(row)
                rec = _post_record(row)
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        self._hub.publish(ChangeEvent(kind="UPDATE", post_id=rec.id))
        return rec

    def delete_post(self, post_id: str) -> None:
        try:
            with self._session_factory() as db:
                row = db.get(Post, post_id)
                if row is None:
                    raise CollaboratorError("Post not found")
                db.delete(row)
                db.commit()
        except SQLAlchemyError as e:
            raise CollaboratorError(str(e)) from e

        self._hub.publish(ChangeEvent(kind="DELETE", post_id=post_id))

    def on_change(self, handler: ChangeHandler) -> Unsubscribe:
        return self._hub.subscribe(handler)


# ─────────────────────────────────────────────
# VERIFICATION DOCUMENTS
# ─────────────────────────────────────────────

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    base = Path(filename or "upload").name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "upload"


class FileDocumentStore(DocumentStore):
    """
    Blobs on the local filesystem under `root`, metadata in
    verification_documents. Keys are `<user_id>/<epoch_ms>-<filename>`.
    """

    def __init__(self, session_factory: sessionmaker, root: Path):
        self._session_factory = session_factory
        self._root = Path(root)

    def upload(self, user_id: str, filename: str, content_type: str, data: bytes) -> StoredDocument:
        name = safe_filename(filename)
        key = f"{user_id}/{int(time.time() * 1000)}-{name}"
        path = self._root / key

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise CollaboratorError(str(e)) from e

        try:
            with self._session_factory() as db:
                row = VerificationDocument(
                    user_id=user_id,
                    storage_key=key,
                    filename=name,
                    content_type=content_type,
                    size_bytes=len(data),
                )
                db.add(row)
                db.commit()
                return StoredDocument(
                    id=row.id,
                    user_id=user_id,
                    storage_key=key,
                    filename=name,
                    content_type=content_type,
                    size_bytes=len(data),
                )
        except SQLAlchemyError as e:
            path.unlink(missing_ok=True)
            raise CollaboratorError(str(e)) from e


def build_sql_backend(settings: Settings) -> Backend:
    engine = build_engine(settings.database_url)

    if settings.auto_create_tables:
        import sikshasetu.models  # noqa: F401  (table registration)

        Base.metadata.create_all(bind=engine)

    factory = build_session_factory(engine)
    log.info("backend connected", extra={"dialect": engine.dialect.name})

    return Backend(
        identity=SqlIdentityProvider(
            factory, require_email_confirmation=settings.require_email_confirmation
        ),
        profiles=SqlProfileStore(factory),
        posts=SqlPostStore(factory),
        documents=FileDocumentStore(factory, Path(settings.upload_dir)),
        configured=True,
        _closers=[engine.dispose],
    )
