# sikshasetu/services/auth_service.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from sikshasetu.backend.base import (
    AuthSessionInfo,
    Backend,
    CollaboratorError,
    UserProfile,
)
from sikshasetu.core.errors import (
    ActionDenied,
    AuthError,
    ProfileMissing,
    StorageOperationError,
    ValidationError,
    map_auth_error,
)
from sikshasetu.models.enums import UserRole, initial_verification_status
from sikshasetu.policies.permissions import REASON_SIGN_IN

log = logging.getLogger(__name__)

_EMAIL_SHAPE = re.compile(r"^[^@\s]+@[^@\s]+$")


def derive_username(email: str) -> str:
    return email.strip().split("@")[0]


@dataclass(frozen=True)
class SessionContext:
    """
    Who is calling: resolved once per request and passed to whatever needs
    it. `profile` is None both for anonymous callers and for identities whose
    profile row was never written; `profile_missing` tells them apart.
    """

    session: Optional[AuthSessionInfo] = None
    profile: Optional[UserProfile] = None

    @property
    def signed_in(self) -> bool:
        return self.session is not None

    @property
    def profile_missing(self) -> bool:
        return self.session is not None and self.profile is None


class AuthService:
    def __init__(self, backend: Backend, *, password_min_length: int = 6):
        self._backend = backend
        self._password_min_length = password_min_length

    # ─────────────────────────────────────────────
    # LOCAL VALIDATION
    # ─────────────────────────────────────────────

    def validate_credentials(self, email: str, password: str) -> None:
        if not (email or "").strip() or not password:
            raise ValidationError("Please fill in all fields")
        if not _EMAIL_SHAPE.match(email.strip()):
            raise ValidationError("Please enter a valid email address")
        if len(password) < self._password_min_length:
            raise ValidationError(
                f"Password must be at least {self._password_min_length} characters"
            )

    def _auth_failure(self, e: CollaboratorError) -> AuthError:
        err = map_auth_error(str(e))
        if err.code == "auth_failed":
            # not a known user-facing case: keep the raw cause for diagnostics
            log.error("identity provider failure", exc_info=e)
        else:
            log.info("auth rejected", extra={"code": err.code})
        return err

    # ─────────────────────────────────────────────
    # REGISTRATION (two non-atomic writes)
    # ─────────────────────────────────────────────

    def register(self, email: str, password: str, role: UserRole) -> UserProfile:
        self.validate_credentials(email, password)

        try:
            identity = self._backend.identity.register(email, password)
        except CollaboratorError as e:
            raise self._auth_failure(e)

        profile = UserProfile(
            id=identity.id,
            email=identity.email,
            username=derive_username(identity.email),
            role=role,
            verification_status=initial_verification_status(role),
        )

        try:
            created = self._backend.profiles.create_profile(profile)
        except CollaboratorError as e:
            # identity exists without profile; next sign-in reports profile_missing
            log.error(
                "profile creation failed after identity registration",
                extra={"identity_id": identity.id},
                exc_info=e,
            )
            raise StorageOperationError(
                "Your account was created but your profile could not be saved. "
                "Sign in to finish setting it up.",
                cause=e,
            )

        log.info("user registered", extra={"user_id": created.id, "role": role.value})
        return created

    # ─────────────────────────────────────────────
    # SESSIONS
    # ─────────────────────────────────────────────

    def login(self, email: str, password: str) -> AuthSessionInfo:
        if not (email or "").strip() or not password:
            raise ValidationError("Please fill in all fields")

        try:
            return self._backend.identity.login(email, password)
        except CollaboratorError as e:
            raise self._auth_failure(e)

    def logout(self, access_token: str) -> None:
        try:
            self._backend.identity.logout(access_token)
        except CollaboratorError as e:
            log.error("logout failed", exc_info=e)
            raise StorageOperationError("Error signing out", cause=e)

    def resolve(self, access_token: Optional[str]) -> SessionContext:
        try:
            session = self._backend.identity.current_session(access_token)
            if session is None:
                return SessionContext()
            profile = self._backend.profiles.get_profile(session.identity_id)
        except CollaboratorError as e:
            log.error("session resolution failed", exc_info=e)
            raise StorageOperationError("Could not load your session", cause=e)

        return SessionContext(session=session, profile=profile)

    # ─────────────────────────────────────────────
    # PROFILE PRESENCE
    # ─────────────────────────────────────────────

    @staticmethod
    def viewer_of(ctx: SessionContext) -> Optional[UserProfile]:
        """
        Acting profile for writes, None when anonymous. A signed-in identity
        without a profile is reported rather than treated as anonymous.
        """
        if ctx.profile_missing:
            raise ProfileMissing(ctx.session.identity_id)
        return ctx.profile

    @staticmethod
    def require_profile(ctx: SessionContext) -> UserProfile:
        if not ctx.signed_in:
            raise ActionDenied("Please sign in first", reason=REASON_SIGN_IN)
        if ctx.profile is None:
            raise ProfileMissing(ctx.session.identity_id)
        return ctx.profile

    def repair_profile(self, ctx: SessionContext, role: UserRole) -> UserProfile:
        if not ctx.signed_in:
            raise ActionDenied("Please sign in first", reason=REASON_SIGN_IN)
        if ctx.profile is not None:
            raise ValidationError("Profile already exists")

        profile = UserProfile(
            id=ctx.session.identity_id,
            email=ctx.session.email,
            username=derive_username(ctx.session.email),
            role=role,
            verification_status=initial_verification_status(role),
        )
        try:
            created = self._backend.profiles.create_profile(profile)
        except CollaboratorError as e:
            log.error("profile repair failed", extra={"identity_id": profile.id}, exc_info=e)
            raise StorageOperationError("Failed to create profile", cause=e)

        log.info("profile repaired", extra={"user_id": created.id, "role": role.value})
        return created
