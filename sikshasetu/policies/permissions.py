#sikshasetu/policies/permissions.py
from __future__ import annotations

from typing import Dict, Optional

from sikshasetu.backend.base import PostRecord, UserProfile
from sikshasetu.core.errors import ActionDenied
from sikshasetu.models.enums import UserRole


# --- Core action constants ---
ACTION_POST = "POST"
ACTION_CLAIM_RESOURCE = "CLAIM_RESOURCE"
ACTION_SEE_CONTACT = "SEE_CONTACT"
ACTION_EDIT_POST = "EDIT_POST"
ACTION_DELETE_POST = "DELETE_POST"

# --- Denial reasons, highest priority first ---
REASON_SIGN_IN = "sign_in_required"
REASON_ROLE = "role_mismatch"
REASON_VERIFICATION = "verification_required"
REASON_NOT_OWNER = "not_owner"

STUDENT_ONLY_ACTIONS = {ACTION_CLAIM_RESOURCE, ACTION_SEE_CONTACT}
OWNER_ACTIONS = {ACTION_EDIT_POST, ACTION_DELETE_POST}

DENIAL_MESSAGES: Dict[str, Dict[str, str]] = {
    ACTION_POST: {
        REASON_SIGN_IN: "Sign in to share content",
        REASON_VERIFICATION: "Verify your student status to share content",
    },
    ACTION_CLAIM_RESOURCE: {
        REASON_SIGN_IN: "Please sign in to claim resources",
        REASON_ROLE: "Only students can claim resources",
        REASON_VERIFICATION: "You need to be a verified student to claim resources",
    },
    ACTION_SEE_CONTACT: {
        REASON_SIGN_IN: "Sign in to view contact details",
        REASON_ROLE: "Only students can view donor contact details",
        REASON_VERIFICATION: "Verify your student status to view contact details",
    },
    ACTION_EDIT_POST: {
        REASON_SIGN_IN: "Sign in to edit posts",
        REASON_NOT_OWNER: "Only the author can edit this post",
    },
    ACTION_DELETE_POST: {
        REASON_SIGN_IN: "Sign in to delete posts",
        REASON_NOT_OWNER: "Only the author can delete this post",
    },
}


# ─────────────────────────────────────────────
# PREDICATES (pure)
# ─────────────────────────────────────────────

def can_post(user: Optional[UserProfile]) -> bool:
    if user is None:
        return False
    return user.role == UserRole.DONOR or user.is_verified


def can_claim_resource(user: Optional[UserProfile]) -> bool:
    if user is None:
        return False
    return user.role == UserRole.STUDENT and user.is_verified


def can_see_contact_info(user: Optional[UserProfile]) -> bool:
    # contact details are gated exactly like claiming
    return can_claim_resource(user)


def can_edit_or_delete_post(user: Optional[UserProfile], post: PostRecord) -> bool:
    if user is None:
        return False
    return post.user_id == user.id


# ─────────────────────────────────────────────
# DENIALS
# ─────────────────────────────────────────────

def denial_reason(
    user: Optional[UserProfile],
    action: str,
    post: Optional[PostRecord] = None,
) -> Optional[str]:
    """
    Single reason for a denied action, None if allowed.
    Order: sign in, role, verification (ownership for owner actions).
    """
    if action not in DENIAL_MESSAGES:
        raise ValueError(f"Unknown action {action}.")

    if user is None:
        return REASON_SIGN_IN

    if action in OWNER_ACTIONS:
        if post is None:
            raise ValueError(f"Action {action} needs a post.")
        return None if can_edit_or_delete_post(user, post) else REASON_NOT_OWNER

    if action in STUDENT_ONLY_ACTIONS and user.role != UserRole.STUDENT:
        return REASON_ROLE

    if action == ACTION_POST and user.role == UserRole.DONOR:
        return None

    if not user.is_verified:
        return REASON_VERIFICATION

    return None


def denial_message(
    user: Optional[UserProfile],
    action: str,
    post: Optional[PostRecord] = None,
) -> Optional[str]:
    reason = denial_reason(user, action, post)
    if reason is None:
        return None
    return DENIAL_MESSAGES[action][reason]


def require(
    user: Optional[UserProfile],
    action: str,
    post: Optional[PostRecord] = None,
) -> None:
    reason = denial_reason(user, action, post)
    if reason is not None:
        raise ActionDenied(DENIAL_MESSAGES[action][reason], reason=reason)


def capabilities(user: Optional[UserProfile]) -> Dict[str, bool]:
    return {
        "can_post": can_post(user),
        "can_claim_resource": can_claim_resource(user),
        "can_see_contact_info": can_see_contact_info(user),
    }
