"""
Auth domain: request orchestration.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.config import AuthSettings
from ustbian.auth.schemas import LoginRequest, RegisterRequest, TokenResponse
from ustbian.auth.service import authenticate_user, create_access_token
from ustbian.models.user import User
from ustbian.users.service import create_user

logger = logging.getLogger(__name__)


def _issue(user: User, settings: AuthSettings) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id, user.email, settings),
        expires_in=settings.expire_seconds,
    )


async def register(
    session: AsyncSession, body: RegisterRequest, settings: AuthSettings
) -> TokenResponse:
    user = await create_user(
        session,
        email=body.email,
        username=body.username,
        display_name=body.display_name,
        password=body.password,
        bio=body.bio,
    )
    logger.info("Registered user %s (@%s)", user.id, user.username)
    return _issue(user, settings)


async def login(
    session: AsyncSession, body: LoginRequest, settings: AuthSettings
) -> TokenResponse:
    user = await authenticate_user(session, body.email, body.password)
    return _issue(user, settings)
