"""Interactions router: likes, comments and saved posts.

Comment listing is public; everything else needs a bearer token.
Zero business logic: delegates entirely to controller.
"""

from __future__ import annotations

from uuid import UUID

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser
from ustbian.database import get_db
from ustbian.dependencies import get_broadcaster, get_current_user, get_redis
from ustbian.interactions import controller
from ustbian.interactions.schemas import (
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
    LikedPostIdsResponse,
    LikeStatusResponse,
    SavedPostIdsResponse,
    SavedStatusResponse,
)
from ustbian.interactions.service import COMMENT_PAGE_LIMIT
from ustbian.posts.schemas import PostListResponse
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse

router = APIRouter(tags=["Interactions"])

_403 = {"description": "Forbidden"}
_404 = {"description": "Not found"}
_409 = {"description": "Conflict: already liked / saved, or post does not exist"}
_429 = {"description": "Rate limit exceeded"}


# ---------------------------------------------------------------------------
# Like endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/posts/{post_id}/likes",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Like a post",
    description="Returns 409 if already liked or the post does not exist.",
    responses={409: _409},
)
async def like_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> SuccessResponse:
    return await controller.like_post(post_id, current_user.id, db, broadcaster)


@router.delete(
    "/posts/{post_id}/likes",
    response_model=SuccessResponse,
    summary="Unlike a post",
    description="Idempotent: succeeds even when the post was not liked.",
)
async def unlike_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> SuccessResponse:
    return await controller.unlike_post(post_id, current_user.id, db, broadcaster)


@router.get(
    "/posts/{post_id}/likes",
    response_model=LikeStatusResponse,
    summary="My like state and the like count for a post",
)
async def like_status(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> LikeStatusResponse:
    return await controller.like_status(post_id, current_user.id, db)


@router.get("/likes/my", response_model=LikedPostIdsResponse, summary="IDs of posts I have liked")
async def my_likes(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> LikedPostIdsResponse:
    return await controller.my_likes(current_user.id, db)


# ---------------------------------------------------------------------------
# Comment endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/posts/{post_id}/comments",
    response_model=CommentListResponse,
    summary="List comments on a post",
    description="Top-level comments and replies, oldest first.",
)
async def list_comments(
    post_id: UUID,
    limit: int = Query(default=COMMENT_PAGE_LIMIT, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> CommentListResponse:
    return await controller.list_comments(post_id, db, limit, offset)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
    description="Set parent_id to reply. Rate-limited to 5 comments per minute when Redis is configured.",
    responses={404: _404, 429: _429},
)
async def add_comment(
    post_id: UUID,
    body: CreateCommentRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
    redis: aioredis.Redis | None = Depends(get_redis),
) -> CommentResponse:
    return await controller.add_comment(post_id, body, current_user.id, db, broadcaster, redis)


@router.delete(
    "/posts/{post_id}/comments/{comment_id}",
    response_model=SuccessResponse,
    summary="Delete a comment",
    description="Deletes the comment and every reply beneath it. Only the comment's author may delete.",
    responses={403: _403},
)
async def delete_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> SuccessResponse:
    return await controller.delete_comment(post_id, comment_id, current_user.id, db, broadcaster)


# ---------------------------------------------------------------------------
# Saved post endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/posts/{post_id}/saved",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a post",
    responses={409: _409},
)
async def save_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await controller.save_post(post_id, current_user.id, db)


@router.delete(
    "/posts/{post_id}/saved",
    response_model=SuccessResponse,
    summary="Unsave a post",
    description="Idempotent: succeeds even when the post was not saved.",
)
async def unsave_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await controller.unsave_post(post_id, current_user.id, db)


@router.get("/posts/{post_id}/saved", response_model=SavedStatusResponse, summary="Is this post saved?")
async def saved_status(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SavedStatusResponse:
    return await controller.saved_status(post_id, current_user.id, db)


@router.get("/saved-posts/my", response_model=PostListResponse, summary="My saved posts")
async def my_saved_posts(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    return await controller.my_saved_posts(current_user.id, db)


@router.get("/saved-posts/my/ids", response_model=SavedPostIdsResponse, summary="IDs of my saved posts")
async def my_saved_post_ids(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> SavedPostIdsResponse:
    return await controller.my_saved_post_ids(current_user.id, db)
