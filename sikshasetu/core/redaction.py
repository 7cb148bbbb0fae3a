from __future__ import annotations
from typing import Iterable, List, Optional

from sikshasetu.backend.base import PostRecord, UserProfile
from sikshasetu.models.enums import PostType
from sikshasetu.policies.permissions import can_see_contact_info

CONTACT_PLACEHOLDER = "Verification required to view contact"


def redact_post(post: PostRecord, viewer: Optional[UserProfile]) -> PostRecord:
    # presentation-time only; stored rows keep the contact
    if post.post_type != PostType.DONATION or can_see_contact_info(viewer):
        return post
    return post.with_contact(CONTACT_PLACEHOLDER)


def redact_posts(posts: Iterable[PostRecord], viewer: Optional[UserProfile]) -> List[PostRecord]:
    return [redact_post(p, viewer) for p in posts]
