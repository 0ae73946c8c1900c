"""
Social graph domain: follow routes.

All routes prefixed /api/v1/users (same prefix as the profile router; the
sub-paths do not overlap).

Routes:
  POST   /{user_id}/follow              Follow a user  (50/hour rate limit)
  DELETE /{user_id}/follow              Unfollow (idempotent)
  GET    /{user_id}/follow              Do I follow this user?
  GET    /{user_id}/follow/followers    Who follows the user
  GET    /{user_id}/follow/following    Who the user follows
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser
from ustbian.database import get_db
from ustbian.dependencies import get_broadcaster, get_current_user
from ustbian.rate_limit import limiter
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse
from ustbian.social_graph import controller as ctrl
from ustbian.social_graph.schemas import FollowListResponse, FollowStatusResponse

router = APIRouter(prefix="/users", tags=["social-graph"])


@router.post(
    "/{user_id}/follow",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Follow a user",
    description="Rate-limited to 50 follow actions per hour. 409 on self-follow or duplicate.",
)
@limiter.limit("50/hour")
async def follow_user(
    request: Request,
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> SuccessResponse:
    return await ctrl.follow_user(session, broadcaster, current_user.id, user_id)


@router.delete("/{user_id}/follow", response_model=SuccessResponse, summary="Unfollow a user")
async def unfollow_user(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    return await ctrl.unfollow_user(session, current_user.id, user_id)


@router.get("/{user_id}/follow", response_model=FollowStatusResponse, summary="Do I follow this user?")
async def follow_status(
    user_id: uuid.UUID,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> FollowStatusResponse:
    return await ctrl.follow_status(session, current_user.id, user_id)


@router.get("/{user_id}/follow/followers", response_model=FollowListResponse, summary="Followers")
async def list_followers(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_followers(session, user_id)


@router.get("/{user_id}/follow/following", response_model=FollowListResponse, summary="Following")
async def list_following(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> FollowListResponse:
    return await ctrl.list_following(session, user_id)
