#sikshasetu/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from sikshasetu.core.auth_deps import get_services, get_session_context, require_token
from sikshasetu.core.errors import ActionDenied, AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.models.enums import UserRole
from sikshasetu.policies.permissions import REASON_SIGN_IN, capabilities
from sikshasetu.schemas.auth import (
    LoginRequest,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
)
from sikshasetu.schemas.profiles import ProfileOut
from sikshasetu.services.auth_service import SessionContext
from sikshasetu.services.container import AppServices

router = APIRouter(prefix="/auth")


def _welcome(role: UserRole) -> str:
    if role == UserRole.DONOR:
        return (
            "Welcome to SikshaSetu as a donor! You can start sharing resources immediately."
        )
    return (
        "Welcome to SikshaSetu as a student! Verify your student status to post "
        "and claim resources."
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(req: RegisterRequest, services: AppServices = Depends(get_services)):
    try:
        profile = services.auth.register(req.email, req.password, req.role)
    except AppError as e:
        raise to_http(e)

    return RegisterResponse(
        profile=ProfileOut.from_record(profile),
        message=_welcome(profile.role),
    )


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, services: AppServices = Depends(get_services)):
    try:
        session = services.auth.login(req.email, req.password)
    except AppError as e:
        raise to_http(e)

    return TokenResponse(access_token=session.access_token, expires_at=session.expires_at)


@router.post("/logout")
def logout(token: str = Depends(require_token), services: AppServices = Depends(get_services)):
    try:
        services.auth.logout(token)
    except AppError as e:
        raise to_http(e)

    return {"status": "signed_out"}


@router.get("/me", response_model=MeResponse)
def get_me(ctx: SessionContext = Depends(get_session_context)):
    if not ctx.signed_in:
        raise to_http(ActionDenied("Please sign in first", reason=REASON_SIGN_IN))

    return MeResponse(
        user_id=ctx.session.identity_id,
        email=ctx.session.email,
        profile=ProfileOut.from_record(ctx.profile) if ctx.profile else None,
        profile_missing=ctx.profile_missing,
        capabilities=capabilities(ctx.profile),
    )
