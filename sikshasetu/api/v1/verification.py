#sikshasetu/api/v1/verification.py
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from sikshasetu.backend.base import UserProfile
from sikshasetu.core.auth_deps import get_current_profile, get_services
from sikshasetu.core.errors import AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.schemas.verification import VerificationStatusResponse, VerificationUploadResponse
from sikshasetu.services.container import AppServices

router = APIRouter(prefix="/verification")


@router.get("", response_model=VerificationStatusResponse)
def verification_status(
    profile: UserProfile = Depends(get_current_profile),
    services: AppServices = Depends(get_services),
):
    return services.verification.status(profile)


@router.post("/upload", response_model=VerificationUploadResponse)
def upload_verification(
    file: UploadFile = File(...),
    profile: UserProfile = Depends(get_current_profile),
    services: AppServices = Depends(get_services),
):
    # one byte past the ceiling is enough to reject oversize files
    data = file.file.read(services.verification.max_bytes + 1)

    try:
        updated = services.verification.submit(
            profile,
            filename=file.filename,
            content_type=file.content_type,
            data=data,
        )
    except AppError as e:
        raise to_http(e)

    return VerificationUploadResponse(
        verification_status=updated.verification_status,
        message="Verification document uploaded successfully! Your verification is now pending review.",
    )
