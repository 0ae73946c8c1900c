"""
Auth router: token issuance.

Only HTTP concerns live here. Zero business logic. Zero DB queries.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.config import AuthSettings, get_auth_settings
from shared.models.user import CurrentUser
from ustbian.auth import controller as ctrl
from ustbian.auth.schemas import LoginRequest, RegisterRequest, TokenResponse
from ustbian.database import get_db
from ustbian.dependencies import get_current_user
from ustbian.users import controller as users_ctrl
from ustbian.users.schemas import MeResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={409: {"description": "Email or username already taken"}},
)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_db),
    settings: AuthSettings = Depends(get_auth_settings),
) -> TokenResponse:
    return await ctrl.register(session, body, settings)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Exchange email + password for a bearer token",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_db),
    settings: AuthSettings = Depends(get_auth_settings),
) -> TokenResponse:
    return await ctrl.login(session, body, settings)


@router.get("/me", response_model=MeResponse, summary="Current user from the bearer token")
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> MeResponse:
    return await users_ctrl.get_me(session, current_user.id)
