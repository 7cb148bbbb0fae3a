"""
Demo accounts for local development:

    python -m sikshasetu.seed

Idempotent: accounts that already exist are left alone.
"""
import logging

from sikshasetu.backend.factory import build_backend
from sikshasetu.core.config import get_settings
from sikshasetu.core.errors import AuthError
from sikshasetu.core.logging import configure_logging
from sikshasetu.models.enums import PostType, UserRole, VerificationStatus
from sikshasetu.services.auth_service import AuthService
from sikshasetu.services.post_lifecycle import PostDraft, PostLifecycleManager

log = logging.getLogger(__name__)

DEMO_PASSWORD = "sikshasetu-demo"

DEMO_USERS = [
    ("donor@sikshasetu.dev", UserRole.DONOR, None),
    ("verified.student@sikshasetu.dev", UserRole.STUDENT, VerificationStatus.VERIFIED),
    ("new.student@sikshasetu.dev", UserRole.STUDENT, None),
]


def seed():
    settings = get_settings()
    configure_logging(settings)

    backend = build_backend(settings)
    auth = AuthService(backend, password_min_length=settings.password_min_length)
    posts = PostLifecycleManager(backend.posts)

    try:
        for email, role, status in DEMO_USERS:
            try:
                profile = auth.register(email, DEMO_PASSWORD, role)
            except AuthError as e:
                if e.code != "account_exists":
                    raise
                log.info("demo user exists", extra={"email": email})
                continue

            if status is not None:
                profile = backend.profiles.update_profile(profile.id, verification_status=status)

            if role == UserRole.DONOR:
                posts.create(
                    profile,
                    PostDraft(
                        post_type=PostType.DONATION,
                        resource_title="Class 12 Physics (NCERT) set",
                        resource_category="books",
                        resource_contact=email,
                    ),
                )
                posts.create(
                    profile,
                    PostDraft(
                        post_type=PostType.WISDOM,
                        content="Revise a little every day; cramming the night before rarely works.",
                    ),
                )

            log.info("demo user created", extra={"email": email, "role": role.value})
    finally:
        backend.close()


if __name__ == "__main__":
    seed()
