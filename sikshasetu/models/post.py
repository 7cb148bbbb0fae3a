# sikshasetu/models/post.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sikshasetu.db.base import Base
from sikshasetu.models.profile import Profile


def _now():
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    post_type: Mapped[str] = mapped_column(String(16), nullable=False)

    # wisdom
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # donation
    resource_title: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    resource_category: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    resource_contact: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    author: Mapped[Optional[Profile]] = relationship(Profile, lazy="joined")

    __table_args__ = (
        Index("ix_posts_created_at_id", "created_at", "id"),
        Index("ix_posts_user", "user_id"),
    )
