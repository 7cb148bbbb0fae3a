from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from sikshasetu.backend.base import UserProfile
from sikshasetu.models.enums import UserRole, VerificationStatus


class ProfileOut(BaseModel):
    id: str
    email: str
    username: str
    role: UserRole
    verification_status: VerificationStatus
    created_at: Optional[datetime] = None
    bio: Optional[str] = None
    organization: Optional[str] = None
    donor_type: Optional[str] = None

    @classmethod
    def from_record(cls, p: UserProfile) -> "ProfileOut":
        return cls(
            id=p.id,
            email=p.email,
            username=p.username,
            role=p.role,
            verification_status=p.verification_status,
            created_at=p.created_at,
            bio=p.bio,
            organization=p.organization,
            donor_type=p.donor_type,
        )


class AuthorOut(BaseModel):
    """Public slice of a profile shown next to a post (no email)."""

    id: str
    username: str
    role: UserRole
    verification_status: VerificationStatus

    @classmethod
    def from_record(cls, p: UserProfile) -> "AuthorOut":
        return cls(
            id=p.id,
            username=p.username,
            role=p.role,
            verification_status=p.verification_status,
        )


class ProfileRepairRequest(BaseModel):
    role: UserRole
