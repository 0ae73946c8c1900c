"""Posts service: pure business logic, no FastAPI imports.

Mentions are resolved against the user directory on every write:
  create  → MENTION notification for each mentioned user except the author
  update  → notifications for newly added mentions, deletes for dropped ones
  remove  → mention, like and comment notifications for the post are deleted
            before the row; likes, comments and saves go with the row via FK
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.models.post import Post
from ustbian.models.user import User
from ustbian.notifications import service as notifications_service
from ustbian.notifications.triggers import MentionTrigger
from ustbian.posts.exceptions import AuthorNotFoundError, PostAccessDeniedError, PostNotFoundError
from ustbian.posts.mentions import extract_mentions, get_added_mentions, get_removed_mentions
from ustbian.posts.schemas import CreatePostRequest, UpdatePostRequest
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.users.service import get_users_by_usernames

logger = logging.getLogger(__name__)

RECENT_LIMIT = 20
HASHTAG_LIMIT = 50


async def _notify_mentions(
    post: Post,
    author: User,
    usernames: Iterable[str],
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> None:
    for user in await get_users_by_usernames(db, usernames):
        if user.id == author.id:
            continue
        await notifications_service.create(
            user.id, MentionTrigger(post.post_id), db, broadcaster, actor=author
        )


async def create(
    author_id: UUID,
    body: CreatePostRequest,
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> Post:
    author = await db.get(User, author_id)
    if author is None:
        raise AuthorNotFoundError(author_id)

    post = Post(author_id=author_id, content=body.content, media_urls=body.media_urls)
    db.add(post)
    await db.flush()
    post.author = author

    await _notify_mentions(post, author, extract_mentions(post.content), db, broadcaster)
    return post


async def find_by_id(post_id: UUID, db: AsyncSession) -> Post:
    post = await db.get(Post, post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    return post


async def list_recent(db: AsyncSession, limit: int = RECENT_LIMIT) -> list[Post]:
    rows = await db.execute(select(Post).order_by(Post.created_at.desc()).limit(limit))
    return list(rows.scalars().all())


async def search_by_hashtag(tag: str, db: AsyncSession, limit: int = HASHTAG_LIMIT) -> list[Post]:
    """Case-insensitive substring match on ``#tag``. A leading '#' in ``tag`` is ignored."""
    tag = tag.strip().lstrip("#")
    if not tag:
        return []
    rows = await db.execute(
        select(Post)
        .where(Post.content.icontains(f"#{tag}", autoescape=True))
        .order_by(Post.created_at.desc())
        .limit(limit)
    )
    return list(rows.scalars().all())


async def update(
    author_id: UUID,
    post_id: UUID,
    body: UpdatePostRequest,
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> Post:
    post = await find_by_id(post_id, db)
    if post.author_id != author_id:
        raise PostAccessDeniedError()

    old_content = post.content
    if body.content is not None:
        post.content = body.content
    if "media_urls" in body.model_fields_set:
        post.media_urls = body.media_urls
    await db.flush()

    if post.content != old_content:
        added = get_added_mentions(old_content, post.content)
        removed = get_removed_mentions(old_content, post.content)
        if added:
            await _notify_mentions(post, post.author, added, db, broadcaster)
        for user in await get_users_by_usernames(db, removed):
            await notifications_service.delete_mention_notification(
                user.id, post.post_id, db, broadcaster
            )
    return post


async def remove(
    author_id: UUID,
    post_id: UUID,
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> None:
    post = await find_by_id(post_id, db)
    if post.author_id != author_id:
        raise PostAccessDeniedError()

    await notifications_service.delete_all_mention_notifications_for_post(
        post.post_id, db, broadcaster
    )
    await notifications_service.delete_engagement_notifications_for_post(
        post.post_id, db, broadcaster
    )
    await db.delete(post)
    await db.flush()
    logger.info("Post %s deleted by %s", post_id, author_id)
