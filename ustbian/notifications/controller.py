from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.notifications import service
from ustbian.notifications.schemas import (
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)


async def get_notifications(user_id: UUID, db: AsyncSession, limit: int) -> NotificationListResponse:
    items = await service.get_for_user(user_id, db, limit=limit)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(n) for n in items],
        unread_count=await service.unread_count(user_id, db),
    )


async def get_unread_count(user_id: UUID, db: AsyncSession) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=await service.unread_count(user_id, db))


async def mark_read(user_id: UUID, notification_id: UUID, db: AsyncSession) -> MarkReadResponse:
    return MarkReadResponse(success=await service.mark_as_read(user_id, notification_id, db))


async def mark_all_read(user_id: UUID, db: AsyncSession) -> MarkAllReadResponse:
    return MarkAllReadResponse(updated=await service.mark_all_as_read(user_id, db))
