import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import NotificationType, notification_type_enum
from .columns import JSONType, Timestamp, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    notification_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, primary_key=True, default=uuid.uuid4
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Null for system-originated notifications
    actor_id: Mapped[uuid.UUID | None] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
    )
    type: Mapped[NotificationType] = mapped_column(notification_type_enum, nullable=False)
    message: Mapped[str | None] = mapped_column(sa.String(255), nullable=True)
    # Client-facing metadata (postId, commentId, followerId). "metadata" is reserved
    # on declarative classes, hence the attribute name.
    context: Mapped[dict | None] = mapped_column("metadata", JSONType, nullable=True)
    # Soft references to the trigger; no FK so compensating deletes stay explicit
    post_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    comment_id: Mapped[uuid.UUID | None] = mapped_column(sa.Uuid, nullable=True)
    read: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False, default=utcnow)

    actor = relationship("User", foreign_keys=[actor_id], lazy="joined")

    __table_args__ = (
        sa.Index("ix_notifications_recipient_created_at", "recipient_id", "created_at"),
        sa.Index("ix_notifications_recipient_read", "recipient_id", "read"),
        sa.Index("ix_notifications_post_id", "post_id"),
        sa.Index("ix_notifications_comment_id", "comment_id"),
    )
