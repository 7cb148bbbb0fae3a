# sikshasetu/services/page_service.py
from __future__ import annotations

from typing import Any, Dict, List

from sikshasetu.core.types import PageType
from sikshasetu.policies.permissions import (
    ACTION_CLAIM_RESOURCE,
    ACTION_POST,
    can_claim_resource,
    can_post,
    denial_message,
)
from sikshasetu.schemas.posts import PostOut
from sikshasetu.schemas.profiles import ProfileOut
from sikshasetu.services.auth_service import SessionContext
from sikshasetu.services.post_lifecycle import PostLifecycleManager
from sikshasetu.services.profile_service import ProfileService
from sikshasetu.services.verification_service import VerificationService

COMPOSER_OPEN_MESSAGE = "Share your thoughts with the community!"

PRIVACY_POLICY: List[Dict[str, str]] = [
    {
        "title": "Information We Collect",
        "body": "Your email address, username, role and, for students, the student ID "
                "image you upload for verification.",
    },
    {
        "title": "Student Verification",
        "body": "Student ID images are used only to confirm student status and maintain "
                "community trust. We do not share this information with third parties.",
    },
    {
        "title": "How We Use Your Information",
        "body": "To run your account, show your posts to the community and reveal donor "
                "contact details to verified students only.",
    },
    {
        "title": "Data Security",
        "body": "We apply technical and organizational measures against unauthorized access, "
                "alteration, disclosure or destruction. Posts you share are visible to all "
                "platform users.",
    },
    {
        "title": "Contact Us",
        "body": "Questions about this policy: privacy@sikshasetu.com. We respond to all "
                "inquiries within 72 hours.",
    },
    {
        "title": "Consent",
        "body": "By using SikshaSetu you consent to this policy. Students consent to the "
                "processing of their student ID for verification.",
    },
]


class PageService:
    """
    Builds the view model for one navigation page. Only `privacy` works
    without a backend.
    """

    def __init__(
        self,
        posts: PostLifecycleManager,
        profiles: ProfileService,
        verification: VerificationService,
    ):
        self._posts = posts
        self._profiles = profiles
        self._verification = verification

    def render(self, page: PageType, ctx: SessionContext) -> Dict[str, Any]:
        if page == PageType.privacy:
            return self.privacy()
        if page == PageType.profile:
            return self.profile(ctx)
        if page == PageType.verification:
            return self.verification(ctx)
        return self.feed(ctx)

    def feed(self, ctx: SessionContext) -> Dict[str, Any]:
        viewer = ctx.profile
        posts = self._posts.feed(viewer)
        return {
            "page": PageType.feed.value,
            "signed_in": ctx.signed_in,
            "profile_missing": ctx.profile_missing,
            "composer": {
                # hidden for anonymous viewers
                "visible": viewer is not None,
                "enabled": can_post(viewer),
                "message": denial_message(viewer, ACTION_POST) or COMPOSER_OPEN_MESSAGE,
            },
            "claim": {
                "enabled": can_claim_resource(viewer),
                "message": denial_message(viewer, ACTION_CLAIM_RESOURCE),
            },
            "posts": [PostOut.from_record(p).model_dump(mode="json") for p in posts],
        }

    def profile(self, ctx: SessionContext) -> Dict[str, Any]:
        if ctx.profile is None:
            return {
                "page": PageType.profile.value,
                "signed_in": ctx.signed_in,
                "profile_missing": ctx.profile_missing,
                "message": "Please sign in to view your profile.",
            }
        return {
            "page": PageType.profile.value,
            "signed_in": True,
            "profile_missing": False,
            "profile": ProfileOut.from_record(ctx.profile).model_dump(mode="json"),
            **self._profiles.summary(ctx.profile),
        }

    def verification(self, ctx: SessionContext) -> Dict[str, Any]:
        if ctx.profile is None:
            return {
                "page": PageType.verification.value,
                "signed_in": ctx.signed_in,
                "profile_missing": ctx.profile_missing,
                "message": "Please sign in to access verification.",
            }
        return {
            "page": PageType.verification.value,
            "signed_in": True,
            "profile_missing": False,
            **self._verification.status(ctx.profile),
        }

    @staticmethod
    def privacy() -> Dict[str, Any]:
        return {
            "page": PageType.privacy.value,
            "title": "Privacy Policy",
            "sections": PRIVACY_POLICY,
        }
