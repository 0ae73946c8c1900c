"""Request-scoped dependencies shared by every router.

Route modules import from here rather than from ``shared`` directly, so if the
current-user lookup ever needs a database round-trip only this file changes.
"""

import redis.asyncio as aioredis
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.auth.dependencies import get_current_user_optional, get_current_user_required
from ustbian.database import get_db
from ustbian.realtime.broadcaster import Broadcaster

get_current_user = get_current_user_required
get_optional_user = get_current_user_optional


def get_broadcaster(request: Request, db: AsyncSession = Depends(get_db)) -> Broadcaster:
    """Events raised while handling the request go out once its transaction commits."""
    return request.app.state.broadcaster.bind(db)


def get_redis(request: Request) -> aioredis.Redis | None:
    """Redis is optional; features backed by it degrade to no-ops without it."""
    return getattr(request.app.state, "redis", None)
