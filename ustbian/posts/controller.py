"""Posts controller: orchestration layer between router and service.

Builds PostResponse objects with engagement counts and the viewer's own
like/save state, computed in batch for the whole page.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.exceptions import ForbiddenError, NotFoundError, UserNotFound
from ustbian.interactions import service as interactions_service
from ustbian.models.post import Post
from ustbian.posts import service
from ustbian.posts.exceptions import AuthorNotFoundError, PostAccessDeniedError, PostNotFoundError
from ustbian.posts.schemas import CreatePostRequest, PostListResponse, PostResponse, UpdatePostRequest
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse


async def build_post_responses(
    posts: list[Post], db: AsyncSession, viewer_id: UUID | None = None
) -> list[PostResponse]:
    post_ids = [p.post_id for p in posts]
    like_counts = await interactions_service.count_likes_for_posts(post_ids, db)
    comment_counts = await interactions_service.count_comments_for_posts(post_ids, db)

    liked: set[UUID] | None = None
    saved: set[UUID] | None = None
    if viewer_id is not None:
        liked = set(await interactions_service.get_likes_for_posts(viewer_id, post_ids, db))
        saved = set(await interactions_service.get_saved_post_ids_for_posts(viewer_id, post_ids, db))

    return [
        PostResponse.model_validate(p).model_copy(
            update={
                "likes_count": like_counts.get(p.post_id, 0),
                "comments_count": comment_counts.get(p.post_id, 0),
                "liked_by_me": None if liked is None else p.post_id in liked,
                "saved_by_me": None if saved is None else p.post_id in saved,
            }
        )
        for p in posts
    ]


async def _single(post: Post, db: AsyncSession, viewer_id: UUID | None) -> PostResponse:
    return (await build_post_responses([post], db, viewer_id))[0]


async def create_post(
    body: CreatePostRequest, author_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> PostResponse:
    try:
        post = await service.create(author_id, body, db, broadcaster)
    except AuthorNotFoundError:
        raise UserNotFound()
    return await _single(post, db, author_id)


async def get_post(post_id: UUID, db: AsyncSession, viewer_id: UUID | None) -> PostResponse:
    try:
        post = await service.find_by_id(post_id, db)
    except PostNotFoundError:
        raise NotFoundError("Post")
    return await _single(post, db, viewer_id)


async def list_posts(db: AsyncSession, limit: int, viewer_id: UUID | None) -> PostListResponse:
    posts = await service.list_recent(db, limit=limit)
    items = await build_post_responses(posts, db, viewer_id)
    return PostListResponse(items=items, total=len(items))


async def search_hashtag(
    tag: str, db: AsyncSession, limit: int, viewer_id: UUID | None
) -> PostListResponse:
    posts = await service.search_by_hashtag(tag, db, limit=limit)
    items = await build_post_responses(posts, db, viewer_id)
    return PostListResponse(items=items, total=len(items))


async def update_post(
    post_id: UUID,
    body: UpdatePostRequest,
    author_id: UUID,
    db: AsyncSession,
    broadcaster: Broadcaster,
) -> PostResponse:
    try:
        post = await service.update(author_id, post_id, body, db, broadcaster)
    except PostNotFoundError:
        raise NotFoundError("Post")
    except PostAccessDeniedError:
        raise ForbiddenError("You can only edit your own posts.")
    return await _single(post, db, author_id)


async def delete_post(
    post_id: UUID, author_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> SuccessResponse:
    try:
        await service.remove(author_id, post_id, db, broadcaster)
    except PostNotFoundError:
        raise NotFoundError("Post")
    except PostAccessDeniedError:
        raise ForbiddenError("You can only delete your own posts.")
    return SuccessResponse(message="Post deleted successfully.")
