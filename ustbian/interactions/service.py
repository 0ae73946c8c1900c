"""Interactions service: pure business logic, no FastAPI imports.

Likes, saves and comments are check-then-act: a concurrent duplicate slips
past the existence check and is stopped by the unique constraint, surfacing
as the same "already liked/saved" error.

Redis is used only for comment rate limiting: 5 comments/minute per user
  key: ustbian:rate:comment:{user_id}  type: counter, TTL=60s
Redis calls are best-effort and skipped when Redis is not configured.
"""

from __future__ import annotations

import logging
from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

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
from ustbian.interactions.schemas import CreateCommentRequest, comment_payload
from ustbian.models.comment import Comment
from ustbian.models.interaction import Like, SavedPost
from ustbian.models.post import Post
from ustbian.models.user import User
from ustbian.notifications import service as notifications_service
from ustbian.notifications.triggers import CommentTrigger, LikeTrigger
from ustbian.realtime.broadcaster import Broadcaster

logger = logging.getLogger(__name__)

_COMMENT_RATE_LIMIT = 5  # max comments per window
_COMMENT_RATE_WINDOW = 60  # seconds

COMMENT_PAGE_LIMIT = 50


async def _counts_by_post(column, post_ids: list[UUID], db: AsyncSession) -> dict[UUID, int]:
    if not post_ids:
        return {}
    rows = await db.execute(
        select(column, func.count()).where(column.in_(post_ids)).group_by(column)
    )
    counts = {post_id: 0 for post_id in post_ids}
    counts.update({post_id: total for post_id, total in rows.all()})
    return counts


# ---------------------------------------------------------------------------
# Like operations
# ---------------------------------------------------------------------------


async def check_like(user_id: UUID, post_id: UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        select(exists().where(Like.user_id == user_id, Like.post_id == post_id))
    )
    return result.scalar_one()


async def like(user_id: UUID, post_id: UUID, db: AsyncSession, broadcaster: Broadcaster) -> Like:
    """Like a post.

    Raises PostUnavailableError if the post is gone and AlreadyLikedError on a
    duplicate. The post author is notified unless they liked their own post.
    """
    post = await db.get(Post, post_id)
    if post is None:
        raise PostUnavailableError(post_id)
    if await check_like(user_id, post_id, db):
        raise AlreadyLikedError()

    row = Like(user_id=user_id, post_id=post_id)
    db.add(row)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadyLikedError() from exc

    await broadcaster.emit_like_added(post_id, user_id)

    if post.author_id != user_id:
        liker = await db.get(User, user_id)
        await notifications_service.create(
            post.author_id, LikeTrigger(post_id), db, broadcaster, actor=liker
        )
    return row


async def unlike(user_id: UUID, post_id: UUID, db: AsyncSession, broadcaster: Broadcaster) -> bool:
    """Remove a like. Returns False (and does nothing) when there was none."""
    result = await db.execute(
        select(Like).where(Like.user_id == user_id, Like.post_id == post_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return False

    await db.delete(row)
    await db.flush()
    await broadcaster.emit_like_removed(post_id, user_id)
    await notifications_service.delete_like_notification(user_id, post_id, db, broadcaster)
    return True


async def get_likes_for_posts(user_id: UUID, post_ids: list[UUID], db: AsyncSession) -> list[UUID]:
    """Subset of ``post_ids`` the user has liked."""
    if not post_ids:
        return []
    rows = await db.execute(
        select(Like.post_id).where(Like.user_id == user_id, Like.post_id.in_(post_ids))
    )
    return list(rows.scalars().all())


async def get_liked_post_ids(user_id: UUID, db: AsyncSession) -> list[UUID]:
    rows = await db.execute(
        select(Like.post_id).where(Like.user_id == user_id).order_by(Like.created_at.desc())
    )
    return list(rows.scalars().all())


async def count_for_post(post_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Like).where(Like.post_id == post_id))
    return result.scalar_one()


async def count_likes_for_posts(post_ids: list[UUID], db: AsyncSession) -> dict[UUID, int]:
    return await _counts_by_post(Like.post_id, post_ids, db)


# ---------------------------------------------------------------------------
# Comment operations
# ---------------------------------------------------------------------------


async def _check_comment_rate_limit(author_id: UUID, redis: aioredis.Redis | None) -> None:
    if redis is None:
        return
    rate_key = f"ustbian:rate:comment:{author_id}"
    try:
        count = await redis.incr(rate_key)
        if count == 1:
            await redis.expire(rate_key, _COMMENT_RATE_WINDOW)
    except aioredis.RedisError as exc:
        logger.warning("Comment rate limit check skipped: %s", exc)
        return
    if count > _COMMENT_RATE_LIMIT:
        raise CommentRateLimitError()


async def add_comment(
    post_id: UUID,
    author_id: UUID,
    payload: CreateCommentRequest,
    db: AsyncSession,
    broadcaster: Broadcaster,
    redis: aioredis.Redis | None = None,
) -> Comment:
    """Create a comment or reply.

    A reply's parent must exist and belong to the same post. The post author
    gets a COMMENT notification unless they are the commenter.
    """
    post = await db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    author = await db.get(User, author_id)
    if author is None:
        raise CommentAuthorNotFoundError(author_id)

    if payload.parent_id is not None:
        parent = await db.get(Comment, payload.parent_id)
        if parent is None or parent.post_id != post_id:
            raise CommentNotFoundError(payload.parent_id)

    await _check_comment_rate_limit(author_id, redis)

    comment = Comment(
        post_id=post_id,
        author_id=author_id,
        parent_comment_id=payload.parent_id,
        content=payload.content,
    )
    db.add(comment)
    await db.flush()
    comment.author = author

    await broadcaster.emit_comment_added(post_id, comment_payload(comment))

    if post.author_id != author_id:
        await notifications_service.create(
            post.author_id,
            CommentTrigger(post_id, comment.comment_id),
            db,
            broadcaster,
            actor=author,
        )
    return comment


async def _reply_subtree_ids(root_id: UUID, db: AsyncSession) -> list[UUID]:
    """``root_id`` followed by every reply beneath it, breadth-first."""
    ids = [root_id]
    frontier = [root_id]
    while frontier:
        rows = await db.execute(
            select(Comment.comment_id).where(Comment.parent_comment_id.in_(frontier))
        )
        frontier = list(rows.scalars().all())
        ids.extend(frontier)
    return ids


async def delete_comment(
    author_id: UUID,
    comment_id: UUID,
    db: AsyncSession,
    broadcaster: Broadcaster,
    post_id: UUID | None = None,
) -> bool:
    """Delete a comment together with all of its replies.

    Returns False when the comment does not exist (or not under ``post_id``).
    Only the comment's author may delete it; replies by other users go with it.
    """
    comment = await db.get(Comment, comment_id)
    if comment is None or (post_id is not None and comment.post_id != post_id):
        return False
    if comment.author_id != author_id:
        raise CommentAccessDeniedError()

    thread_post_id = comment.post_id
    doomed = await _reply_subtree_ids(comment_id, db)
    await notifications_service.delete_comment_notifications(doomed, db, broadcaster)
    await db.execute(
        delete(Comment)
        .where(Comment.comment_id.in_(doomed))
        .execution_options(synchronize_session="fetch")
    )
    await db.flush()

    for deleted_id in doomed:
        await broadcaster.emit_comment_deleted(thread_post_id, deleted_id)
    return True


async def list_for_post(
    post_id: UUID,
    db: AsyncSession,
    limit: int = COMMENT_PAGE_LIMIT,
    offset: int = 0,
) -> list[Comment]:
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_comments_for_post(post_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(Comment).where(Comment.post_id == post_id)
    )
    return result.scalar_one()


async def count_comments_for_posts(post_ids: list[UUID], db: AsyncSession) -> dict[UUID, int]:
    return await _counts_by_post(Comment.post_id, post_ids, db)


# ---------------------------------------------------------------------------
# Saved post operations
# ---------------------------------------------------------------------------


async def check_saved(user_id: UUID, post_id: UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        select(exists().where(SavedPost.user_id == user_id, SavedPost.post_id == post_id))
    )
    return result.scalar_one()


async def save(user_id: UUID, post_id: UUID, db: AsyncSession) -> SavedPost:
    """Bookmark a post. Private: no broadcast, no notification."""
    if await db.get(Post, post_id) is None:
        raise PostUnavailableError(post_id)
    if await check_saved(user_id, post_id, db):
        raise AlreadySavedError()

    row = SavedPost(user_id=user_id, post_id=post_id)
    db.add(row)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadySavedError() from exc
    return row


async def unsave(user_id: UUID, post_id: UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
    )
    return result.rowcount > 0


async def get_saved_posts_for_user(user_id: UUID, db: AsyncSession) -> list[Post]:
    """Saved posts, most recently saved first."""
    rows = await db.execute(
        select(Post)
        .join(SavedPost, SavedPost.post_id == Post.post_id)
        .where(SavedPost.user_id == user_id)
        .order_by(SavedPost.created_at.desc())
    )
    return list(rows.unique().scalars().all())


async def get_saved_post_ids_for_posts(
    user_id: UUID, post_ids: list[UUID], db: AsyncSession
) -> list[UUID]:
    """Subset of ``post_ids`` the user has saved."""
    if not post_ids:
        return []
    rows = await db.execute(
        select(SavedPost.post_id).where(
            SavedPost.user_id == user_id, SavedPost.post_id.in_(post_ids)
        )
    )
    return list(rows.scalars().all())


async def get_saved_post_ids(user_id: UUID, db: AsyncSession) -> list[UUID]:
    rows = await db.execute(
        select(SavedPost.post_id)
        .where(SavedPost.user_id == user_id)
        .order_by(SavedPost.created_at.desc())
    )
    return list(rows.scalars().all())
