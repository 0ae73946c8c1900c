from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ustbian.models.enums import NotificationType
from ustbian.users.schemas import UserSummary


class NotificationResponse(BaseModel):
    """Single notification item, also the payload pushed on ``notification.{recipientId}``."""

    model_config = ConfigDict(from_attributes=True)

    notification_id: UUID
    recipient_id: UUID
    type: NotificationType
    actor: UserSummary | None = None
    message: str | None = None
    metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias="context",
        description="postId / commentId / followerId of the triggering content.",
    )
    read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int = Field(description="Unread notifications for this user, across all pages.")


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    success: bool


class MarkAllReadResponse(BaseModel):
    success: bool = True
    updated: int = Field(description="Number of notifications flipped to read.")


def notification_payload(notification: Any) -> dict[str, Any]:
    return NotificationResponse.model_validate(notification).model_dump(mode="json")
