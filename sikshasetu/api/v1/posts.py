#sikshasetu/api/v1/posts.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from sikshasetu.core.auth_deps import get_services, get_session_context
from sikshasetu.core.errors import AppError
from sikshasetu.core.http_errors import to_http
from sikshasetu.schemas.posts import ClaimResponse, PostCreateRequest, PostOut, PostUpdateRequest
from sikshasetu.services.auth_service import AuthService, SessionContext
from sikshasetu.services.container import AppServices
from sikshasetu.services.post_lifecycle import PostDraft

router = APIRouter()


@router.get("/posts", response_model=List[PostOut])
def list_posts(
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        # reads work without a profile row; the viewer is treated as unverified
        posts = services.posts.list_posts(ctx.profile)
    except AppError as e:
        raise to_http(e)

    return [PostOut.from_record(p) for p in posts]


@router.get("/feed", response_model=List[PostOut])
def get_feed(
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    """Synchronized snapshot; may trail /posts by one refresh."""
    try:
        posts = services.posts.feed(ctx.profile)
    except AppError as e:
        raise to_http(e)

    return [PostOut.from_record(p) for p in posts]


@router.post("/posts", response_model=PostOut, status_code=201)
def create_post(
    req: PostCreateRequest,
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    draft = PostDraft(
        post_type=req.post_type,
        content=req.content,
        resource_title=req.resource_title,
        resource_category=req.resource_category,
        resource_contact=req.resource_contact,
    )
    try:
        user = AuthService.viewer_of(ctx)
        post = services.posts.create(user, draft)
    except AppError as e:
        raise to_http(e)

    # author sees their own post as everyone else would
    return PostOut.from_record(services.posts.render(post, user))


@router.put("/posts/{post_id}", response_model=PostOut)
def edit_post(
    post_id: str,
    req: PostUpdateRequest,
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        user = AuthService.viewer_of(ctx)
        post = services.posts.edit(
            user,
            post_id,
            post_type=req.post_type,
            content=req.content,
            resource_title=req.resource_title,
            resource_category=req.resource_category,
            resource_contact=req.resource_contact,
        )
    except AppError as e:
        raise to_http(e)

    return PostOut.from_record(services.posts.render(post, user))


@router.delete("/posts/{post_id}")
def delete_post(
    post_id: str,
    confirm: bool = Query(False, description="must be true; deletion is irreversible"),
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        user = AuthService.viewer_of(ctx)
        services.posts.delete(user, post_id, confirmed=confirm)
    except AppError as e:
        raise to_http(e)

    return {"status": "deleted", "postId": post_id}


@router.post("/posts/{post_id}/claim", response_model=ClaimResponse)
def claim_resource(
    post_id: str,
    ctx: SessionContext = Depends(get_session_context),
    services: AppServices = Depends(get_services),
):
    try:
        user = AuthService.viewer_of(ctx)
        post = services.posts.claim(user, post_id)
    except AppError as e:
        raise to_http(e)

    return ClaimResponse(
        post_id=post.id,
        resource_title=post.resource_title or "",
        resource_contact=post.resource_contact or "",
        message=f"Contact the donor: {post.resource_contact}",
    )
