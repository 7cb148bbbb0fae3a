from __future__ import annotations

from typing import Any, Dict, Optional

from sikshasetu.backend.base import UserProfile
from sikshasetu.models.enums import UserRole, VerificationStatus
from sikshasetu.policies.permissions import capabilities


def role_badge(user: UserProfile) -> str:
    return "Donor/Mentor" if user.role == UserRole.DONOR else "Student"


def verification_badge(user: UserProfile) -> Dict[str, Optional[str]]:
    """
    Label plus, for unverified students, the page that fixes it.
    """
    if user.role == UserRole.DONOR:
        return {"label": "Verified Donor", "action_page": None}
    if user.verification_status == VerificationStatus.VERIFIED:
        return {"label": "Verified Student", "action_page": None}
    if user.verification_status == VerificationStatus.PENDING:
        return {"label": "Pending", "action_page": None}
    return {"label": "Get Verified", "action_page": "verification"}


class ProfileService:
    """
    Read-only profile view. bio, organization and donor_type are display
    fields; only the verification flow changes a profile.
    """

    def summary(self, user: UserProfile) -> Dict[str, Any]:
        return {
            "role_badge": role_badge(user),
            "verification_badge": verification_badge(user),
            "capabilities": capabilities(user),
        }
