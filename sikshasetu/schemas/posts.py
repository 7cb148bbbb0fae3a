from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from sikshasetu.backend.base import PostRecord
from sikshasetu.core.post_states import PostState
from sikshasetu.models.enums import PostType
from sikshasetu.schemas.profiles import AuthorOut


class PostCreateRequest(BaseModel):
    post_type: PostType
    content: Optional[str] = None
    resource_title: Optional[str] = None
    resource_category: Optional[str] = None
    resource_contact: Optional[str] = None


class PostUpdateRequest(BaseModel):
    # full replacement of the variant group; post_type may be echoed but not changed
    post_type: Optional[PostType] = None
    content: Optional[str] = None
    resource_title: Optional[str] = None
    resource_category: Optional[str] = None
    resource_contact: Optional[str] = None


class PostOut(BaseModel):
    id: str
    user_id: str
    post_type: PostType
    state: PostState
    content: Optional[str] = None
    resource_title: Optional[str] = None
    resource_category: Optional[str] = None
    resource_contact: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    author: Optional[AuthorOut] = None

    @classmethod
    def from_record(cls, p: PostRecord) -> "PostOut":
        return cls(
            id=p.id,
            user_id=p.user_id,
            post_type=p.post_type,
            state=PostState.EDITED if p.updated_at else PostState.PUBLISHED,
            content=p.content,
            resource_title=p.resource_title,
            resource_category=p.resource_category,
            resource_contact=p.resource_contact,
            created_at=p.created_at,
            updated_at=p.updated_at,
            author=AuthorOut.from_record(p.author) if p.author else None,
        )


class ClaimResponse(BaseModel):
    post_id: str
    resource_title: str
    resource_contact: str
    message: str
