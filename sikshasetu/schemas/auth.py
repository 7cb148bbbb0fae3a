from __future__ import annotations
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field

from sikshasetu.models.enums import UserRole
from sikshasetu.schemas.profiles import ProfileOut


class RegisterRequest(BaseModel):
    email: str
    password: str
    role: UserRole = Field(UserRole.STUDENT, description="student or donor; fixed for the account lifetime")


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class RegisterResponse(BaseModel):
    status: str = "registered"
    profile: ProfileOut
    message: str


class MeResponse(BaseModel):
    user_id: str
    email: str
    profile: Optional[ProfileOut] = None
    profile_missing: bool = False
    capabilities: Dict[str, bool] = Field(default_factory=dict)
