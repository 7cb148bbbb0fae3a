# sikshasetu/api/v1/profile.py
from fastapi import APIRouter, Depends

from sikshasetu.backend.base import UserProfile
from sikshasetu.core.auth_deps import get_current_profile, get_services, get_session_context
from sikshasetu.core.errors import AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.schemas.profiles import ProfileOut, ProfileRepairRequest
from sikshasetu.services.auth_service import SessionContext
from sikshasetu.services.container import AppServices

router = APIRouter(prefix="/profile")


def _profile_body(services: AppServices, profile: UserProfile) -> dict:
    return {
        "profile": ProfileOut.from_record(profile).model_dump(mode="json"),
        **services.profiles.summary(profile),
    }


@router.get("/me")
def get_my_profile(
    profile: UserProfile = Depends(get_current_profile),
    services: AppServices = Depends(get_services),
):
    return _profile_body(services, profile)


# ✅ Recovery for identities whose profile write failed during registration
@router.post("/repair", status_code=201)
def repair_profile(
    req: ProfileRepairRequest,
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        created = services.auth.repair_profile(ctx, req.role)
    except AppError as e:
        raise to_http(e)

    return _profile_body(services, created)
