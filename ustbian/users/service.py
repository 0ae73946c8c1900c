"""
User directory: pure business logic (zero FastAPI imports).

Lookups return ``None`` for missing users; callers decide whether absence is
an error. Writes use flush() so the caller's transaction owns the commit.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.auth.utils import hash_password
from ustbian.exceptions import UserAlreadyExists, UserNotFound
from ustbian.models.user import User

_SEARCH_LIMIT_MAX = 50


# ── Queries ────────────────────────────────────────────────────────────────────

async def get_user_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        sa.select(User).where(sa.func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(sa.select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_users_by_usernames(
    session: AsyncSession, usernames: Iterable[str]
) -> list[User]:
    """Resolve a batch of usernames; unknown names are silently skipped."""
    names = set(usernames)
    if not names:
        return []
    result = await session.execute(sa.select(User).where(User.username.in_(names)))
    return list(result.scalars().all())


async def search_users(session: AsyncSession, query: str, limit: int = 20) -> list[User]:
    """Case-insensitive substring match on username or display name."""
    query = query.strip()
    if not query:
        return []
    limit = max(1, min(limit, _SEARCH_LIMIT_MAX))
    result = await session.execute(
        sa.select(User)
        .where(
            sa.or_(
                User.username.icontains(query, autoescape=True),
                User.display_name.icontains(query, autoescape=True),
            )
        )
        .order_by(User.username)
        .limit(limit)
    )
    return list(result.scalars().all())


# ── Writes ─────────────────────────────────────────────────────────────────────

async def create_user(
    session: AsyncSession,
    *,
    email: str,
    username: str,
    display_name: str,
    password: str,
    bio: str | None = None,
) -> User:
    if await get_user_by_email(session, email) is not None:
        raise UserAlreadyExists("email")
    if await get_user_by_username(session, username) is not None:
        raise UserAlreadyExists("username")

    user = User(
        email=email.lower(),
        username=username,
        display_name=display_name,
        password_hash=hash_password(password),
        bio=bio,
    )
    session.add(user)
    await session.flush()
    return user


async def update_profile(
    session: AsyncSession,
    user_id: uuid.UUID,
    *,
    display_name: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
) -> User:
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise UserNotFound()
    if display_name is not None:
        user.display_name = display_name
    if bio is not None:
        user.bio = bio
    if avatar_url is not None:
        user.avatar_url = avatar_url
    await session.flush()
    return user
