from __future__ import annotations
from typing import Optional

from sikshasetu.backend.base import UserProfile
from sikshasetu.core.errors import ActionDenied
from sikshasetu.models.enums import UserRole, VerificationStatus
from sikshasetu.policies.permissions import REASON_ROLE, REASON_SIGN_IN

REASON_ALREADY_PENDING = "verification_pending"
REASON_ALREADY_VERIFIED = "already_verified"


def enforce_can_submit_verification(user: Optional[UserProfile]) -> None:
    """
    Only unverified students may upload a verification document.
    A second attempt while pending is blocked.
    """
    if user is None:
        raise ActionDenied("Please sign in to verify your account", reason=REASON_SIGN_IN)

    if user.role != UserRole.STUDENT:
        raise ActionDenied("Only students can submit verification", reason=REASON_ROLE)

    if user.verification_status == VerificationStatus.PENDING:
        raise ActionDenied("Verification already pending review", reason=REASON_ALREADY_PENDING)

    if user.verification_status == VerificationStatus.VERIFIED:
        raise ActionDenied("Already verified", reason=REASON_ALREADY_VERIFIED)


def verification_page_state(user: UserProfile) -> str:
    if user.role == UserRole.DONOR:
        return "not_required"
    if user.verification_status == VerificationStatus.VERIFIED:
        return "verified"
    if user.verification_status == VerificationStatus.PENDING:
        return "pending"
    return "required"
