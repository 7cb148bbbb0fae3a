#sikshasetu/core/auth_deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sikshasetu.backend.base import UserProfile
from sikshasetu.core.errors import ActionDenied, AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.policies.permissions import REASON_SIGN_IN
from sikshasetu.services.auth_service import AuthService, SessionContext
from sikshasetu.services.container import AppServices

# anonymous callers are allowed through; handlers decide what they may do
bearer = HTTPBearer(auto_error=False)


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_access_token(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[str]:
    return creds.credentials if creds else None


def get_session_context(
    request: Request,
    token: Optional[str] = Depends(get_access_token),
    services: AppServices = Depends(get_services),
) -> SessionContext:
    """
    Canonical session dependency.

    Guarantees:
    - unknown, expired or revoked tokens resolve to an anonymous context
    - a valid session carries its profile, or profile_missing=True
    """
    try:
        ctx = services.auth.resolve(token)
    except AppError as e:
        raise to_http(e)

    request.state.session_context = ctx
    return ctx


def get_current_profile(
    ctx: SessionContext = Depends(get_session_context),
) -> UserProfile:
    try:
        return AuthService.require_profile(ctx)
    except AppError as e:
        raise to_http(e)


def require_token(token: Optional[str] = Depends(get_access_token)) -> str:
    if not token:
        raise to_http(ActionDenied("Please sign in first", reason=REASON_SIGN_IN))
    return token

