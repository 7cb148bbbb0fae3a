# sikshasetu/core/http_errors.py
from __future__ import annotations

from fastapi import HTTPException

from sikshasetu.core.errors import (
    ActionDenied,
    AppError,
    AuthError,
    BackendUnavailableError,
    ConfirmationRequired,
    NotFound,
    ProfileMissing,
    StorageOperationError,
    ValidationError,
)
from sikshasetu.policies.permissions import REASON_SIGN_IN


def to_http(exc: AppError) -> HTTPException:
    """
    Domain error -> HTTPException. `detail` is always {"code", "message", ...}
    and never carries raw collaborator text.
    """
    if isinstance(exc, ConfirmationRequired):
        return HTTPException(
            status_code=428,
            detail={"code": "confirmation_required", "message": exc.message},
        )

    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"code": "validation_error", "message": exc.message},
        )

    if isinstance(exc, AuthError):
        return HTTPException(
            status_code=409 if exc.switch_to_sign_in else 401,
            detail={
                "code": exc.code,
                "message": exc.message,
                "switch_to_sign_in": exc.switch_to_sign_in,
            },
        )

    if isinstance(exc, ActionDenied):
        return HTTPException(
            status_code=401 if exc.reason == REASON_SIGN_IN else 403,
            detail={"code": exc.reason, "message": exc.message},
        )

    if isinstance(exc, ProfileMissing):
        return HTTPException(
            status_code=409,
            detail={"code": "profile_missing", "message": exc.message, "repair": "/profile/repair"},
        )

    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail={"code": "not_found", "message": exc.message})

    if isinstance(exc, BackendUnavailableError):
        return HTTPException(
            status_code=503,
            detail={"code": "backend_unavailable", "message": exc.message},
        )

    if isinstance(exc, StorageOperationError):
        return HTTPException(
            status_code=502,
            detail={"code": "storage_error", "message": exc.message},
        )

    return HTTPException(status_code=500, detail={"code": "internal_error", "message": "Something went wrong"})
