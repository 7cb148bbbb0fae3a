# sikshasetu/services/verification_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sikshasetu.backend.base import Backend, CollaboratorError, StoredDocument, UserProfile
from sikshasetu.core.errors import StorageOperationError, ValidationError
from sikshasetu.models.enums import VerificationStatus
from sikshasetu.policies.verification_policy import (
    enforce_can_submit_verification,
    verification_page_state,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024


class VerificationService:
    def __init__(self, backend: Backend, *, max_bytes: int = DEFAULT_MAX_BYTES):
        self._backend = backend
        self._max_bytes = max_bytes

    def validate_file(self, filename: Optional[str], content_type: Optional[str], data: bytes) -> None:
        """
        Checked before anything is uploaded.
        """
        if not filename or not data:
            raise ValidationError("Please select a file to upload")
        if len(data) > self._max_bytes:
            mb = self._max_bytes // (1024 * 1024)
            raise ValidationError(f"File size must be less than {mb}MB")
        if not (content_type or "").lower().startswith("image/"):
            raise ValidationError("Please select an image file")

    def submit(
        self,
        user: Optional[UserProfile],
        *,
        filename: Optional[str],
        content_type: Optional[str],
        data: bytes,
    ) -> UserProfile:
        """
        unverified student -> document stored -> status pending.
        A failed upload leaves the status untouched.
        """
        enforce_can_submit_verification(user)
        self.validate_file(filename, content_type, data)

        try:
            doc: StoredDocument = self._backend.documents.upload(
                user.id, filename, content_type, data
            )
        except CollaboratorError as e:
            log.error("verification upload failed", extra={"user_id": user.id}, exc_info=e)
            raise StorageOperationError(
                "Failed to upload verification document. Please try again.", cause=e
            )

        try:
            updated = self._backend.profiles.update_profile(
                user.id, verification_status=VerificationStatus.PENDING
            )
        except CollaboratorError as e:
            log.error(
                "verification status update failed",
                extra={"user_id": user.id, "storage_key": doc.storage_key},
                exc_info=e,
            )
            raise StorageOperationError(
                "Failed to upload verification document. Please try again.", cause=e
            )

        log.info("verification submitted", extra={"user_id": user.id, "storage_key": doc.storage_key})
        return updated

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def status(self, user: UserProfile) -> Dict[str, Any]:
        return {
            "state": verification_page_state(user),
            "role": user.role.value,
            "verification_status": user.verification_status.value,
            "max_bytes": self._max_bytes,
            "accepted_types": "image/*",
        }
