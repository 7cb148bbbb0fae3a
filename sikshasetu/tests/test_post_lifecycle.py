import itertools
from datetime import datetime, timedelta, timezone
from typing import Dict, List

import pytest

from sikshasetu.backend.base import ChangeEvent, CollaboratorError, PostRecord, PostStore, UserProfile
from sikshasetu.backend.changes import ChangeHub
from sikshasetu.core.errors import (
    ActionDenied,
    ConfirmationRequired,
    NotFound,
    StorageOperationError,
    ValidationError,
)
from sikshasetu.core.redaction import CONTACT_PLACEHOLDER
from sikshasetu.models.enums import PostType, UserRole, VerificationStatus
from sikshasetu.services.feed_sync import FeedSynchronizer
from sikshasetu.services.post_lifecycle import (
    MSG_EMPTY_WISDOM,
    MSG_INCOMPLETE_DONATION,
    PostDraft,
    PostLifecycleManager,
    validate_draft,
)


class MemoryPostStore(PostStore):
    """Dict-backed store that records every write it receives."""

    def __init__(self):
        self.rows: Dict[str, PostRecord] = {}
        self.writes: List[str] = []
        self.fail_writes = False
        self._ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self._hub = ChangeHub("posts")

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock

    def list_posts(self):
        return sorted(self.rows.values(), key=lambda p: (p.created_at, p.id), reverse=True)

    def get_post(self, post_id):
        return self.rows.get(post_id)

    def create_post(self, user_id, post_type, fields):
        self.writes.append("create")
        if self.fail_writes:
            raise CollaboratorError("connection reset")
        rec = PostRecord(id=f"p{next(self._ids)}", user_id=user_id, post_type=post_type,
                         created_at=self._tick(), **fields)
        self.rows[rec.id] = rec
        self._hub.publish(ChangeEvent("INSERT", rec.id))
        return rec

    def update_post(self, post_id, fields):
        self.writes.append("update")
        if self.fail_writes:
            raise CollaboratorError("connection reset")
        old = self.rows[post_id]
        rec = PostRecord(id=old.id, user_id=old.user_id, post_type=old.post_type,
                         created_at=old.created_at, updated_at=self._tick(), **fields)
        self.rows[post_id] = rec
        self._hub.publish(ChangeEvent("UPDATE", post_id))
        return rec

    def delete_post(self, post_id):
        self.writes.append("delete")
        if self.fail_writes:
            raise CollaboratorError("connection reset")
        del self.rows[post_id]
        self._hub.publish(ChangeEvent("DELETE", post_id))

    def on_change(self, handler):
        return self._hub.subscribe(handler)


def profile(uid, role=UserRole.STUDENT, status=VerificationStatus.UNVERIFIED) -> UserProfile:
    return UserProfile(id=uid, email=f"{uid}@example.org", username=uid, role=role, verification_status=status)


DONOR = profile("donor", UserRole.DONOR, VerificationStatus.VERIFIED)
STUDENT = profile("stu")
VERIFIED = profile("ver", status=VerificationStatus.VERIFIED)

DONATION = PostDraft(
    post_type=PostType.DONATION,
    resource_title="Calculus textbook",
    resource_category="books",
    resource_contact="donor@example.org",
)


@pytest.fixture
def store():
    return MemoryPostStore()


@pytest.fixture
def manager(store):
    return PostLifecycleManager(store)


# ─────────────────────────────────────────────
# VALIDATION
# ─────────────────────────────────────────────

def test_blank_wisdom_rejected_before_store(manager, store):
    with pytest.raises(ValidationError) as e:
        manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="   "))
    assert e.value.message == MSG_EMPTY_WISDOM
    assert store.writes == []


def test_incomplete_donation_rejected(manager, store):
    draft = PostDraft(post_type=PostType.DONATION, resource_title="Laptop", resource_category="electronics")
    with pytest.raises(ValidationError) as e:
        manager.create(DONOR, draft)
    assert e.value.message == MSG_INCOMPLETE_DONATION
    assert store.writes == []


def test_unknown_category_rejected():
    with pytest.raises(ValidationError):
        validate_draft(PostDraft(
            post_type=PostType.DONATION,
            resource_title="x",
            resource_category="spaceships",
            resource_contact="c",
        ))


def test_validated_fields_clear_other_variant():
    fields = validate_draft(PostDraft(post_type=PostType.WISDOM, content="  learn daily ", resource_title="junk"))
    assert fields == {
        "content": "learn daily",
        "resource_title": None,
        "resource_category": None,
        "resource_contact": None,
    }


# ─────────────────────────────────────────────
# PERMISSION GATES
# ─────────────────────────────────────────────

def test_unverified_student_cannot_post(manager, store):
    with pytest.raises(ActionDenied) as e:
        manager.create(STUDENT, PostDraft(post_type=PostType.WISDOM, content="hi"))
    assert e.value.message == "Verify your student status to share content"
    assert store.writes == []


def test_anonymous_cannot_post(manager, store):
    with pytest.raises(ActionDenied):
        manager.create(None, PostDraft(post_type=PostType.WISDOM, content="hi"))
    assert store.writes == []


def test_non_owner_edit_and_delete_denied_without_write(manager, store):
    post = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="mine"))
    store.writes.clear()

    with pytest.raises(ActionDenied):
        manager.edit(VERIFIED, post.id, content="hijack")
    with pytest.raises(ActionDenied):
        manager.delete(VERIFIED, post.id, confirmed=True)

    assert store.writes == []
    assert store.rows[post.id].content == "mine"


# ─────────────────────────────────────────────
# LIFECYCLE
# ─────────────────────────────────────────────

def test_edit_replaces_content_and_keeps_identity(manager, store):
    post = manager.create(VERIFIED, PostDraft(post_type=PostType.WISDOM, content="v1"))
    edited = manager.edit(VERIFIED, post.id, content="v2")

    assert edited.id == post.id
    assert edited.created_at == post.created_at
    assert edited.content == "v2"
    assert edited.updated_at is not None


def test_edit_cannot_change_post_type(manager):
    post = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="v1"))
    with pytest.raises(ValidationError):
        manager.edit(DONOR, post.id, post_type=PostType.DONATION, resource_title="x",
                     resource_category="books", resource_contact="c")


def test_delete_requires_confirmation(manager, store):
    post = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="bye"))

    with pytest.raises(ConfirmationRequired):
        manager.delete(DONOR, post.id, confirmed=False)
    assert post.id in store.rows

    manager.delete(DONOR, post.id, confirmed=True)
    assert post.id not in store.rows


def test_missing_post_is_not_found(manager):
    with pytest.raises(NotFound):
        manager.edit(DONOR, "nope", content="x")


def test_storage_failure_surfaces_generic_message(manager, store):
    store.fail_writes = True
    with pytest.raises(StorageOperationError) as e:
        manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="hi"))
    assert "connection reset" not in e.value.message
    assert isinstance(e.value.cause, CollaboratorError)


# ─────────────────────────────────────────────
# CLAIM / REDACTION
# ─────────────────────────────────────────────

def test_claim_reveals_contact_to_verified_student(manager):
    post = manager.create(DONOR, DONATION)
    claimed = manager.claim(VERIFIED, post.id)
    assert claimed.resource_contact == "donor@example.org"


def test_claim_denied_before_loading(manager):
    with pytest.raises(ActionDenied) as e:
        manager.claim(DONOR, "does-not-exist")
    assert e.value.message == "Only students can claim resources"


def test_wisdom_posts_cannot_be_claimed(manager):
    post = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="tip"))
    with pytest.raises(ValidationError):
        manager.claim(VERIFIED, post.id)


def test_contact_redacted_for_unverified_viewers(manager):
    manager.create(DONOR, DONATION)

    for viewer in (None, STUDENT, DONOR):
        [p] = manager.list_posts(viewer)
        assert p.resource_contact == CONTACT_PLACEHOLDER

    [p] = manager.list_posts(VERIFIED)
    assert p.resource_contact == "donor@example.org"


# ─────────────────────────────────────────────
# FEED INTEGRATION
# ─────────────────────────────────────────────

def test_created_post_appears_once_in_feed(store):
    feed = FeedSynchronizer(store.list_posts)
    feed.start(store)
    manager = PostLifecycleManager(store, feed)

    post = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="first"))

    ids = [p.id for p in manager.feed(None)]
    assert ids.count(post.id) == 1
    feed.stop()


def test_feed_drops_deleted_and_shows_edits(store):
    feed = FeedSynchronizer(store.list_posts)
    feed.start(store)
    manager = PostLifecycleManager(store, feed)

    a = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="a"))
    b = manager.create(DONOR, PostDraft(post_type=PostType.WISDOM, content="b"))
    manager.edit(DONOR, a.id, content="a2")
    manager.delete(DONOR, b.id, confirmed=True)

    snap = manager.feed(DONOR)
    assert [p.id for p in snap] == [a.id]
    assert snap[0].content == "a2"
    feed.stop()
