"""Interactions controller: orchestration layer between router and service."""

from __future__ import annotations

from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    UserNotFound,
)
from ustbian.interactions import service
from ustbian.interactions.exceptions import (
    AlreadyLikedError,
    AlreadySavedError,
    CommentAccessDeniedError,
    CommentAuthorNotFoundError,
    CommentNotFoundError,
    CommentRateLimitError,
    PostNotFoundError,
    PostUnavailableError,
)
from ustbian.interactions.schemas import (
    CommentListResponse,
    CommentResponse,
    CreateCommentRequest,
    LikedPostIdsResponse,
    LikeStatusResponse,
    SavedPostIdsResponse,
    SavedStatusResponse,
)
from ustbian.posts.controller import build_post_responses
from ustbian.posts.schemas import PostListResponse
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse

_POST_MISSING = "Post does not exist."


# ---------------------------------------------------------------------------
# Like controllers
# ---------------------------------------------------------------------------


async def like_post(
    post_id: UUID, user_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> SuccessResponse:
    try:
        await service.like(user_id, post_id, db, broadcaster)
    except PostUnavailableError:
        raise ConflictError(_POST_MISSING)
    except AlreadyLikedError:
        raise ConflictError("You have already liked this post.")
    return SuccessResponse(message="Post liked successfully.")


async def unlike_post(
    post_id: UUID, user_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> SuccessResponse:
    removed = await service.unlike(user_id, post_id, db, broadcaster)
    return SuccessResponse(message="Post unliked successfully." if removed else "Post was not liked.")


async def like_status(post_id: UUID, user_id: UUID, db: AsyncSession) -> LikeStatusResponse:
    return LikeStatusResponse(
        post_id=post_id,
        liked=await service.check_like(user_id, post_id, db),
        likes_count=await service.count_for_post(post_id, db),
    )


async def my_likes(user_id: UUID, db: AsyncSession) -> LikedPostIdsResponse:
    return LikedPostIdsResponse(liked_post_ids=await service.get_liked_post_ids(user_id, db))


# ---------------------------------------------------------------------------
# Comment controllers
# ---------------------------------------------------------------------------


async def list_comments(
    post_id: UUID, db: AsyncSession, limit: int, offset: int
) -> CommentListResponse:
    comments = await service.list_for_post(post_id, db, limit=limit, offset=offset)
    return CommentListResponse(
        items=[CommentResponse.model_validate(c) for c in comments],
        total=await service.count_comments_for_post(post_id, db),
        limit=limit,
        offset=offset,
    )


async def add_comment(
    post_id: UUID,
    body: CreateCommentRequest,
    user_id: UUID,
    db: AsyncSession,
    broadcaster: Broadcaster,
    redis: aioredis.Redis | None,
) -> CommentResponse:
    try:
        comment = await service.add_comment(post_id, user_id, body, db, broadcaster, redis)
    except CommentRateLimitError:
        raise RateLimitError("Comment limit reached: 5 per minute.")
    except PostNotFoundError:
        raise NotFoundError("Post")
    except CommentAuthorNotFoundError:
        raise UserNotFound()
    except CommentNotFoundError:
        raise NotFoundError("Parent comment")
    return CommentResponse.model_validate(comment)


async def delete_comment(
    post_id: UUID,
    comment_id: UUID,
    user_id: UUID,
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> SuccessResponse:
    try:
        deleted = await service.delete_comment(user_id, comment_id, db, broadcaster, post_id=post_id)
    except CommentAccessDeniedError:
        raise ForbiddenError("You can only delete your own comments.")
    return SuccessResponse(
        message="Comment deleted successfully." if deleted else "Comment already deleted."
    )


# ---------------------------------------------------------------------------
# Saved post controllers
# ---------------------------------------------------------------------------


async def save_post(post_id: UUID, user_id: UUID, db: AsyncSession) -> SuccessResponse:
    try:
        await service.save(user_id, post_id, db)
    except PostUnavailableError:
        raise ConflictError(_POST_MISSING)
    except AlreadySavedError:
        raise ConflictError("You have already saved this post.")
    return SuccessResponse(message="Post saved successfully.")


async def unsave_post(post_id: UUID, user_id: UUID, db: AsyncSession) -> SuccessResponse:
    removed = await service.unsave(user_id, post_id, db)
    return SuccessResponse(message="Post unsaved successfully." if removed else "Post was not saved.")


async def saved_status(post_id: UUID, user_id: UUID, db: AsyncSession) -> SavedStatusResponse:
    return SavedStatusResponse(post_id=post_id, saved=await service.check_saved(user_id, post_id, db))


async def my_saved_posts(user_id: UUID, db: AsyncSession) -> PostListResponse:
    posts = await service.get_saved_posts_for_user(user_id, db)
    items = await build_post_responses(posts, db, user_id)
    return PostListResponse(items=items, total=len(items))


async def my_saved_post_ids(user_id: UUID, db: AsyncSession) -> SavedPostIdsResponse:
    return SavedPostIdsResponse(saved_post_ids=await service.get_saved_post_ids(user_id, db))
