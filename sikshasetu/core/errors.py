# sikshasetu/core/errors.py
from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """
    Base for every error the service raises on purpose.
    `message` is always safe to show to the user.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Local input problem. Never reaches the storage collaborator."""


class ConfirmationRequired(ValidationError):
    pass


class AuthError(AppError):
    def __init__(self, message: str, *, code: str = "auth_failed", switch_to_sign_in: bool = False):
        super().__init__(message)
        self.code = code
        self.switch_to_sign_in = switch_to_sign_in


class ActionDenied(AppError, PermissionError):
    """
    Permission Evaluator denial. `reason` is one of the REASON_* constants
    in sikshasetu.policies.permissions.
    """

    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason


class ProfileMissing(AppError):
    """Authenticated identity has no profile row (partial registration)."""

    def __init__(self, identity_id: str):
        super().__init__("Your profile is missing. Choose a role to finish setting up your account.")
        self.identity_id = identity_id


class NotFound(AppError):
    pass


class BackendUnavailableError(AppError):
    def __init__(self, message: str = "Backend not configured. Set DATABASE_URL to connect the data store."):
        super().__init__(message)


class StorageOperationError(AppError):
    """
    Transient create/update/delete/upload failure. `cause` keeps the raw
    collaborator error for logs only.
    """

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


# ─────────────────────────────────────────────
# AUTH ERROR MAPPING (allow-list of collaborator messages)
# ─────────────────────────────────────────────

MSG_INVALID_CREDENTIALS = "Invalid email or password"
MSG_ACCOUNT_EXISTS = "An account with this email already exists. Try signing in instead."
MSG_EMAIL_NOT_CONFIRMED = "Please check your email and confirm your account"
MSG_AUTH_FAILED = "Authentication failed"

RAW_INVALID_CREDENTIALS = "Invalid login credentials"
RAW_USER_EXISTS = "User already registered"
RAW_DUPLICATE_KEY = "duplicate key value"
RAW_EMAIL_NOT_CONFIRMED = "Email not confirmed"


def map_auth_error(raw: str) -> AuthError:
    """
    Collaborator error text -> fixed user-facing AuthError.
    Unknown text never leaks through.
    """
    raw = raw or ""
    if RAW_INVALID_CREDENTIALS in raw:
        return AuthError(MSG_INVALID_CREDENTIALS, code="invalid_credentials")
    if RAW_USER_EXISTS in raw or RAW_DUPLICATE_KEY in raw:
        return AuthError(MSG_ACCOUNT_EXISTS, code="account_exists", switch_to_sign_in=True)
    if RAW_EMAIL_NOT_CONFIRMED in raw:
        return AuthError(MSG_EMAIL_NOT_CONFIRMED, code="email_not_confirmed")
    return AuthError(MSG_AUTH_FAILED)
