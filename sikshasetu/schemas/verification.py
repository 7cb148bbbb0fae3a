from __future__ import annotations
from pydantic import BaseModel

from sikshasetu.models.enums import UserRole, VerificationStatus


class VerificationStatusResponse(BaseModel):
    # not_required | verified | pending | required
    state: str
    role: UserRole
    verification_status: VerificationStatus
    max_bytes: int
    accepted_types: str


class VerificationUploadResponse(BaseModel):
    status: str = "uploaded"
    verification_status: VerificationStatus
    message: str
