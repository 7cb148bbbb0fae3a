from fastapi import APIRouter

from sikshasetu.api.v1.health import router as health_router
from sikshasetu.api.v1.auth import router as auth_router
from sikshasetu.api.v1.profile import router as profile_router
from sikshasetu.api.v1.posts import router as posts_router
from sikshasetu.api.v1.verification import router as verification_router
from sikshasetu.api.v1.pages import router as pages_router


v1_router = APIRouter()

# ------------------------------------------------------------------
# SYSTEM / ACCOUNTS
# ------------------------------------------------------------------
v1_router.include_router(health_router, tags=["health"])
v1_router.include_router(auth_router, tags=["auth"])
v1_router.include_router(profile_router, tags=["profile"])

# ------------------------------------------------------------------
# COMMUNITY FEED
# ------------------------------------------------------------------
v1_router.include_router(posts_router, tags=["posts"])

# ------------------------------------------------------------------
# STUDENT VERIFICATION
# ------------------------------------------------------------------
v1_router.include_router(verification_router, tags=["verification"])

# ------------------------------------------------------------------
# NAVIGATION
# ------------------------------------------------------------------
v1_router.include_router(pages_router, tags=["pages"])
