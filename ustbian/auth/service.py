"""
Auth domain: credential checks and token issuance (zero FastAPI imports).
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.config import AuthSettings
from ustbian.auth.utils import verify_password
from ustbian.exceptions import InvalidCredentials
from ustbian.models.user import User
from ustbian.users.service import get_user_by_email


async def authenticate_user(session: AsyncSession, email: str, password: str) -> User:
    """
    Verify credentials and return the User.

    Unknown email and wrong password raise the same error so the endpoint
    cannot be used to enumerate accounts.
    """
    user = await get_user_by_email(session, email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


def create_access_token(user_id: uuid.UUID, email: str, settings: AuthSettings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(seconds=settings.expire_seconds),
        "iss": settings.issuer,
        "aud": settings.audience,
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)
