# sikshasetu/core/post_states.py
from enum import Enum
from typing import Optional


class PostState(str, Enum):
    DRAFT = "DRAFT"          # client-side only, never persisted
    PUBLISHED = "PUBLISHED"
    EDITED = "EDITED"
    DELETED = "DELETED"      # terminal


ALLOWED_POST_TRANSITIONS = {
    None: {PostState.DRAFT},

    PostState.DRAFT: {
        PostState.PUBLISHED,
    },

    PostState.PUBLISHED: {
        PostState.EDITED,
        PostState.DELETED,
    },

    PostState.EDITED: {
        PostState.EDITED,
        PostState.DELETED,
    },

    PostState.DELETED: set(),
}


def assert_transition(current: Optional[PostState], target: PostState) -> None:
    allowed = ALLOWED_POST_TRANSITIONS.get(current, set())
    if target not in allowed:
        src = current.value if current else "NONE"
        raise ValueError(f"Illegal post transition {src} -> {target.value}.")
