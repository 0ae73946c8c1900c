"""
User directory: profile routes.

Routes (prefix /api/v1/users):
  GET    /search        Search by username or display name
  GET    /me            Authenticated user's own profile (includes email)
  PATCH  /me            Edit display name, bio, avatar
  GET    /{user_id}     Public profile

/search and /me are declared before /{user_id} so literal paths win.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser
from ustbian.database import get_db
from ustbian.dependencies import get_current_user
from ustbian.users import controller as ctrl
from ustbian.users.schemas import MeResponse, UpdateProfileRequest, UserListResponse, UserProfile

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=UserListResponse, summary="Search users")
async def search_users(
    q: str = Query(default="", max_length=100),
    limit: int = Query(default=20, ge=1, le=50),
    session: AsyncSession = Depends(get_db),
) -> UserListResponse:
    return await ctrl.search(session, q, limit)


@router.get("/me", response_model=MeResponse, summary="My profile")
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MeResponse:
    return await ctrl.get_me(session, current_user.id)


@router.patch("/me", response_model=MeResponse, summary="Edit my profile")
async def update_me(
    body: UpdateProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MeResponse:
    return await ctrl.update_me(session, current_user.id, body)


@router.get("/{user_id}", response_model=UserProfile, summary="Public profile")
async def get_profile(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_db),
) -> UserProfile:
    return await ctrl.get_profile(session, user_id)
