"""
User directory: request orchestration.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.exceptions import UserNotFound
from ustbian.users import service as svc
from ustbian.users.schemas import (
    MeResponse,
    UpdateProfileRequest,
    UserListResponse,
    UserProfile,
    UserSummary,
)


async def get_me(session: AsyncSession, user_id: uuid.UUID) -> MeResponse:
    user = await svc.get_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound()
    return MeResponse.model_validate(user)


async def update_me(
    session: AsyncSession, user_id: uuid.UUID, body: UpdateProfileRequest
) -> MeResponse:
    user = await svc.update_profile(
        session,
        user_id,
        display_name=body.display_name,
        bio=body.bio,
        avatar_url=body.avatar_url,
    )
    return MeResponse.model_validate(user)


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> UserProfile:
    user = await svc.get_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound()
    return UserProfile.model_validate(user)


async def search(session: AsyncSession, query: str, limit: int) -> UserListResponse:
    users = await svc.search_users(session, query, limit)
    return UserListResponse(
        items=[UserSummary.model_validate(u) for u in users],
        total=len(users),
    )
