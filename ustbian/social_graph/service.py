"""
Social graph domain: pure business logic (zero FastAPI imports).

State rules:
  follow:   cannot follow self (checked before anything else), both users
            must exist, no duplicate edges; notifies the followee
  unfollow: idempotent
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.exceptions import AlreadyFollowing, CannotFollowSelf, UserNotFound
from ustbian.models.follow import Follow
from ustbian.models.user import User
from ustbian.notifications import service as notifications_service
from ustbian.notifications.triggers import FollowTrigger
from ustbian.realtime.broadcaster import Broadcaster


# ── Internal helpers ───────────────────────────────────────────────────────────

async def _require_user(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user


# ── Follow ─────────────────────────────────────────────────────────────────────

async def is_following(
    session: AsyncSession, follower_id: uuid.UUID, following_id: uuid.UUID
) -> bool:
    result = await session.execute(
        sa.select(sa.exists().where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        ))
    )
    return result.scalar_one()


async def follow(
    session: AsyncSession,
    broadcaster: Broadcaster,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> Follow:
    if follower_id == following_id:
        raise CannotFollowSelf()
    follower = await _require_user(session, follower_id)
    await _require_user(session, following_id)
    if await is_following(session, follower_id, following_id):
        raise AlreadyFollowing()

    edge = Follow(follower_id=follower_id, following_id=following_id)
    session.add(edge)
    try:
        await session.flush()
    except IntegrityError as exc:
        raise AlreadyFollowing() from exc

    await notifications_service.create(
        following_id, FollowTrigger(follower_id), session, broadcaster, actor=follower
    )
    return edge


async def unfollow(
    session: AsyncSession,
    follower_id: uuid.UUID,
    following_id: uuid.UUID,
) -> bool:
    result = await session.execute(
        sa.delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    return result.rowcount > 0


# ── Lists ──────────────────────────────────────────────────────────────────────

async def get_followers(session: AsyncSession, user_id: uuid.UUID) -> list[User]:
    """Users following ``user_id``, newest edge first."""
    await _require_user(session, user_id)
    result = await session.execute(
        sa.select(User)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.scalars().all())


async def get_following(session: AsyncSession, user_id: uuid.UUID) -> list[User]:
    """Users ``user_id`` follows, newest edge first."""
    await _require_user(session, user_id)
    result = await session.execute(
        sa.select(User)
        .join(Follow, Follow.following_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
    )
    return list(result.scalars().all())
