"""Notifications router: /api/v1/notifications endpoints.

All routes are scoped to the authenticated user; other users' notifications
are never visible or mutable.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shared.models.user import CurrentUser
from ustbian.database import get_db
from ustbian.dependencies import get_current_user
from ustbian.notifications import controller
from ustbian.notifications.schemas import (
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    UnreadCountResponse,
)
from ustbian.notifications.service import DEFAULT_LIMIT

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List my notifications",
    description="Newest first. Includes the total unread count for badge display.",
)
async def list_notifications(
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=100),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> NotificationListResponse:
    return await controller.get_notifications(current_user.id, db, limit)


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread badge count")
async def unread_count(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    return await controller.get_unread_count(current_user.id, db)


@router.patch("/read-all", response_model=MarkAllReadResponse, summary="Mark all as read")
async def mark_all_read(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkAllReadResponse:
    return await controller.mark_all_read(current_user.id, db)


@router.patch(
    "/{notification_id}/read",
    response_model=MarkReadResponse,
    summary="Mark one notification as read",
    description="Returns success=false when the notification is missing or not yours.",
)
async def mark_read(
    notification_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MarkReadResponse:
    return await controller.mark_read(current_user.id, notification_id, db)
