"""
Social graph domain: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.realtime.broadcaster import Broadcaster
from ustbian.schemas import SuccessResponse
from ustbian.social_graph import service as svc
from ustbian.social_graph.schemas import FollowListResponse, FollowStatusResponse
from ustbian.users.schemas import UserSummary


def _list(users) -> FollowListResponse:
    return FollowListResponse(
        items=[UserSummary.model_validate(u) for u in users],
        total=len(users),
    )


async def follow_user(
    session: AsyncSession,
    broadcaster: Broadcaster,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> SuccessResponse:
    await svc.follow(session, broadcaster, follower_id, following_id)
    return SuccessResponse(message="Followed successfully.")


async def unfollow_user(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> SuccessResponse:
    removed = await svc.unfollow(session, follower_id, following_id)
    return SuccessResponse(message="Unfollowed successfully." if removed else "Not following.")


async def follow_status(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> FollowStatusResponse:
    return FollowStatusResponse(following=await svc.is_following(session, follower_id, following_id))


async def list_followers(session: AsyncSession, user_id: uuid.UUID) -> FollowListResponse:
    return _list(await svc.get_followers(session, user_id))


async def list_following(session: AsyncSession, user_id: uuid.UUID) -> FollowListResponse:
    return _list(await svc.get_following(session, user_id))
