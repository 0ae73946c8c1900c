"""Posts router: /api/v1/posts endpoints.

Listing, detail and hashtag search are public; a bearer token, when present,
adds the viewer's liked_by_me / saved_by_me flags. Writes require auth and
only the author may edit or delete.
Zero business logic: delegates entirely to controller.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser
from ustbian.database import get_db
from ustbian.dependencies import get_broadcaster, get_current_user, get_optional_user
from ustbian.posts import controller
from ustbian.posts.schemas import CreatePostRequest, PostListResponse, PostResponse, UpdatePostRequest
from ustbian.posts.service import HASHTAG_LIMIT, RECENT_LIMIT
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse

router = APIRouter(prefix="/posts", tags=["Posts"])

_403 = {"description": "Not the author of this post"}
_404 = {"description": "Post not found"}


def _viewer(user: CurrentUser | None) -> UUID | None:
    return user.id if user else None


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    description="Mentioned users (@username) receive a MENTION notification.",
)
async def create_post(
    body: CreatePostRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> PostResponse:
    return await controller.create_post(body, current_user.id, db, broadcaster)


@router.get("", response_model=PostListResponse, summary="Most recent posts")
async def list_posts(
    limit: int = Query(default=RECENT_LIMIT, ge=1, le=100),
    viewer: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    return await controller.list_posts(db, limit, _viewer(viewer))


@router.get(
    "/hashtag/{tag}",
    response_model=PostListResponse,
    summary="Search posts by hashtag",
    description="Case-insensitive; a leading '#' in the tag is ignored.",
)
async def search_hashtag(
    tag: str,
    limit: int = Query(default=HASHTAG_LIMIT, ge=1, le=100),
    viewer: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostListResponse:
    return await controller.search_hashtag(tag, db, limit, _viewer(viewer))


@router.get("/{post_id}", response_model=PostResponse, summary="Get a post", responses={404: _404})
async def get_post(
    post_id: UUID,
    viewer: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> PostResponse:
    return await controller.get_post(post_id, db, _viewer(viewer))


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    summary="Edit a post",
    description="Newly added mentions are notified; dropped mentions lose their notification.",
    responses={403: _403, 404: _404},
)
async def update_post(
    post_id: UUID,
    body: UpdatePostRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> PostResponse:
    return await controller.update_post(post_id, body, current_user.id, db, broadcaster)


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse,
    summary="Delete a post",
    description="Also removes every notification that points at the post.",
    responses={403: _403, 404: _404},
)
async def delete_post(
    post_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> SuccessResponse:
    return await controller.delete_post(post_id, current_user.id, db, broadcaster)
