# sikshasetu/services/post_lifecycle.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from sikshasetu.backend.base import CollaboratorError, PostRecord, PostStore, UserProfile
from sikshasetu.core.errors import ConfirmationRequired, NotFound, StorageOperationError, ValidationError
from sikshasetu.core.post_states import PostState, assert_transition
from sikshasetu.core.redaction import redact_post, redact_posts
from sikshasetu.models.enums import PostType, ResourceCategory
from sikshasetu.policies.permissions import (
    ACTION_CLAIM_RESOURCE,
    ACTION_DELETE_POST,
    ACTION_EDIT_POST,
    ACTION_POST,
    require,
)
from sikshasetu.services.feed_sync import FeedSynchronizer

log = logging.getLogger(__name__)

MSG_EMPTY_WISDOM = "Please enter some wisdom to share"
MSG_INCOMPLETE_DONATION = "Please fill in all donation details"
MSG_UNKNOWN_CATEGORY = "Unknown resource category"
MSG_CONFIRM_DELETE = "Are you sure you want to delete this post? Confirm to continue."


@dataclass(frozen=True)
class PostDraft:
    """Unsaved composer input. Lives only on the caller's side."""

    post_type: PostType
    content: Optional[str] = None
    resource_title: Optional[str] = None
    resource_category: Optional[str] = None
    resource_contact: Optional[str] = None


def _clean(v: Optional[str]) -> str:
    return (v or "").strip()


def validate_draft(draft: PostDraft) -> Dict[str, Optional[str]]:
    """
    Local validation. Returns the full variant field set to persist, with the
    other group explicitly empty.
    """
    if draft.post_type == PostType.WISDOM:
        content = _clean(draft.content)
        if not content:
            raise ValidationError(MSG_EMPTY_WISDOM)
        return {
            "content": content,
            "resource_title": None,
            "resource_category": None,
            "resource_contact": None,
        }

    if draft.post_type == PostType.DONATION:
        title = _clean(draft.resource_title)
        category = _clean(draft.resource_category)
        contact = _clean(draft.resource_contact)
        if not title or not category or not contact:
            raise ValidationError(MSG_INCOMPLETE_DONATION)
        try:
            ResourceCategory(category)
        except ValueError:
            raise ValidationError(MSG_UNKNOWN_CATEGORY)
        return {
            "content": None,
            "resource_title": title,
            "resource_category": category,
            "resource_contact": contact,
        }

    raise ValidationError(f"Unknown post type {draft.post_type}")


def post_state(post: Optional[PostRecord]) -> Optional[PostState]:
    if post is None:
        return None
    return PostState.EDITED if post.updated_at else PostState.PUBLISHED


class PostLifecycleManager:
    """
    Create / edit / delete / list posts, each gated by the permission rules
    before any write reaches the store.
    """

    def __init__(self, posts: PostStore, feed: Optional[FeedSynchronizer] = None):
        self._posts = posts
        self._feed = feed

    # ─────────────────────────────────────────────
    # READS
    # ─────────────────────────────────────────────

    def _load(self, post_id: str) -> PostRecord:
        try:
            post = self._posts.get_post(post_id)
        except CollaboratorError as e:
            log.error("post load failed", extra={"post_id": post_id}, exc_info=e)
            raise StorageOperationError("Failed to load post", cause=e)
        if post is None:
            raise NotFound("Post not found")
        return post

    def list_posts(self, viewer: Optional[UserProfile]) -> List[PostRecord]:
        try:
            posts = self._posts.list_posts()
        except CollaboratorError as e:
            log.error("post list failed", exc_info=e)
            raise StorageOperationError("Failed to load posts", cause=e)
        return redact_posts(posts, viewer)

    def feed(self, viewer: Optional[UserProfile]) -> List[PostRecord]:
        if self._feed is None:
            return self.list_posts(viewer)
        return redact_posts(self._feed.snapshot(), viewer)

    def render(self, post: PostRecord, viewer: Optional[UserProfile]) -> PostRecord:
        return redact_post(post, viewer)

    # ─────────────────────────────────────────────
    # TRANSITIONS
    # ─────────────────────────────────────────────

    def create(self, user: Optional[UserProfile], draft: PostDraft) -> PostRecord:
        fields = validate_draft(draft)
        require(user, ACTION_POST)
        assert_transition(PostState.DRAFT, PostState.PUBLISHED)

        try:
            post = self._posts.create_post(user.id, draft.post_type, fields)
        except CollaboratorError as e:
            log.error("post create failed", extra={"user_id": user.id}, exc_info=e)
            raise StorageOperationError("Failed to create post", cause=e)

        if self._feed is not None:
            self._feed.insert_local(post)

        log.info("post published", extra={"post_id": post.id, "post_type": post.post_type.value})
        return post

    def edit(
        self,
        user: Optional[UserProfile],
        post_id: str,
        *,
        content: Optional[str] = None,
        resource_title: Optional[str] = None,
        resource_category: Optional[str] = None,
        resource_contact: Optional[str] = None,
        post_type: Optional[PostType] = None,
    ) -> PostRecord:
        """
        Full replacement of the variant group. post_type and id never change.
        """
        post = self._load(post_id)
        require(user, ACTION_EDIT_POST, post)

        if post_type is not None and post_type != post.post_type:
            raise ValidationError("Post type cannot be changed")

        fields = validate_draft(
            PostDraft(
                post_type=post.post_type,
                content=content,
                resource_title=resource_title,
                resource_category=resource_category,
                resource_contact=resource_contact,
            )
        )
        assert_transition(post_state(post), PostState.EDITED)

        try:
            updated = self._posts.update_post(post.id, fields)
        except CollaboratorError as e:
            log.error("post update failed", extra={"post_id": post.id}, exc_info=e)
            raise StorageOperationError("Failed to update post", cause=e)

        log.info("post edited", extra={"post_id": post.id})
        return updated

    def delete(self, user: Optional[UserProfile], post_id: str, *, confirmed: bool) -> None:
        post = self._load(post_id)
        require(user, ACTION_DELETE_POST, post)

        if not confirmed:
            raise ConfirmationRequired(MSG_CONFIRM_DELETE)

        assert_transition(post_state(post), PostState.DELETED)

        try:
            self._posts.delete_post(post.id)
        except CollaboratorError as e:
            log.error("post delete failed", extra={"post_id": post.id}, exc_info=e)
            raise StorageOperationError("Failed to delete post", cause=e)

        log.info("post deleted", extra={"post_id": post.id})

    def claim(self, user: Optional[UserProfile], post_id: str) -> PostRecord:
        """
        Verified students get the donor's contact. Nothing is persisted; the
        claim itself happens out-of-band.
        """
        require(user, ACTION_CLAIM_RESOURCE)
        post = self._load(post_id)
        if post.post_type != PostType.DONATION:
            raise ValidationError("Only resource donations can be claimed")
        return post
