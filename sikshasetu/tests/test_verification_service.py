import pytest

from sikshasetu.backend.base import Backend, CollaboratorError, StoredDocument, UserProfile
from sikshasetu.backend.disabled import (
    DisabledDocumentStore,
    DisabledIdentityProvider,
    DisabledPostStore,
    DisabledProfileStore,
)
from sikshasetu.core.errors import ActionDenied, StorageOperationError, ValidationError
from sikshasetu.models.enums import UserRole, VerificationStatus
from sikshasetu.services.verification_service import VerificationService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x01" * 32


class Documents(DisabledDocumentStore):
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    def upload(self, user_id, filename, content_type, data):
        if self.fail:
            raise CollaboratorError("bucket not found")
        self.uploads.append((user_id, filename))
        return StoredDocument(
            id="doc-1",
            user_id=user_id,
            storage_key=f"{user_id}/1-{filename}",
            filename=filename,
            content_type=content_type,
            size_bytes=len(data),
        )


class Profiles(DisabledProfileStore):
    def __init__(self):
        self.updates = []

    def update_profile(self, profile_id, **fields):
        self.updates.append(fields)
        return UserProfile(
            id=profile_id,
            email="s@college.edu",
            username="s",
            role=UserRole.STUDENT,
            verification_status=fields["verification_status"],
        )


def student(status=VerificationStatus.UNVERIFIED, role=UserRole.STUDENT):
    return UserProfile(id="s1", email="s@college.edu", username="s", role=role, verification_status=status)


def build(documents=None, profiles=None, max_bytes=1024):
    documents = documents or Documents()
    profiles = profiles or Profiles()
    backend = Backend(
        identity=DisabledIdentityProvider(),
        profiles=profiles,
        posts=DisabledPostStore(),
        documents=documents,
        configured=True,
    )
    return VerificationService(backend, max_bytes=max_bytes), documents, profiles


def test_submit_moves_unverified_to_pending():
    svc, documents, profiles = build()
    updated = svc.submit(student(), filename="id.png", content_type="image/png", data=PNG)

    assert updated.verification_status == VerificationStatus.PENDING
    assert documents.uploads == [("s1", "id.png")]
    assert profiles.updates == [{"verification_status": VerificationStatus.PENDING}]


@pytest.mark.parametrize(
    "filename,content_type,data,message",
    [
        (None, "image/png", PNG, "Please select a file to upload"),
        ("id.png", "image/png", b"", "Please select a file to upload"),
        ("id.txt", "text/plain", b"hi", "Please select an image file"),
    ],
)
def test_file_checks_run_before_upload(filename, content_type, data, message):
    svc, documents, profiles = build()
    with pytest.raises(ValidationError) as e:
        svc.submit(student(), filename=filename, content_type=content_type, data=data)

    assert e.value.message == message
    assert documents.uploads == []
    assert profiles.updates == []


def test_oversize_file_rejected_with_limit_in_message():
    svc, documents, _ = build(max_bytes=2 * 1024 * 1024)
    with pytest.raises(ValidationError) as e:
        svc.submit(student(), filename="id.png", content_type="image/png", data=b"\x00" * (2 * 1024 * 1024 + 1))

    assert e.value.message == "File size must be less than 2MB"
    assert documents.uploads == []


def test_failed_upload_leaves_status_untouched():
    svc, _, profiles = build(documents=Documents(fail=True))
    with pytest.raises(StorageOperationError) as e:
        svc.submit(student(), filename="id.png", content_type="image/png", data=PNG)

    assert "bucket" not in e.value.message
    assert profiles.updates == []


@pytest.mark.parametrize(
    "profile,reason",
    [
        (None, "sign_in_required"),
        (student(role=UserRole.DONOR, status=VerificationStatus.VERIFIED), "role_mismatch"),
        (student(VerificationStatus.PENDING), "verification_pending"),
        (student(VerificationStatus.VERIFIED), "already_verified"),
    ],
)
def test_only_unverified_students_may_submit(profile, reason):
    svc, documents, _ = build()
    with pytest.raises(ActionDenied) as e:
        svc.submit(profile, filename="id.png", content_type="image/png", data=PNG)
    assert e.value.reason == reason
    assert documents.uploads == []


def test_status_variants():
    svc, _, _ = build()
    assert svc.status(student())["state"] == "required"
    assert svc.status(student(VerificationStatus.PENDING))["state"] == "pending"
    assert svc.status(student(role=UserRole.DONOR))["state"] == "not_required"
