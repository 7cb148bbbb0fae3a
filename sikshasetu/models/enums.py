#sikshasetu/models/enums.py
from __future__ import annotations
from enum import Enum


class UserRole(str, Enum):
    STUDENT = "student"
    DONOR = "donor"


class VerificationStatus(str, Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"


class PostType(str, Enum):
    WISDOM = "wisdom"
    DONATION = "donation"


class ResourceCategory(str, Enum):
    BOOKS = "books"
    STATIONERY = "stationery"
    ELECTRONICS = "electronics"
    COURSES = "courses"
    MENTORSHIP = "mentorship"
    SCHOLARSHIPS = "scholarships"
    INTERNSHIPS = "internships"
    SOFTWARE = "software"
    OTHER = "other"


def initial_verification_status(role: UserRole) -> VerificationStatus:
    # donors are trusted at sign-up; students start unverified
    if role == UserRole.DONOR:
        return VerificationStatus.VERIFIED
    return VerificationStatus.UNVERIFIED
