"""Notification fan-out: persistence plus realtime push.

Notifications are derived state: nothing in the schema ties them to the
post, comment or follow that caused them. Callers that remove a trigger must
call the matching ``delete_*`` helper in the same transaction, and every
deleted row is announced on ``notification.deleted.{recipient}``.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ustbian.models.enums import NotificationType
from ustbian.models.notification import Notification
from ustbian.models.user import User
from ustbian.notifications import triggers
from ustbian.notifications.schemas import notification_payload
from ustbian.realtime.broadcaster import Broadcaster

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


async def create(
    recipient_id: UUID,
    trigger: triggers.Trigger,
    db: AsyncSession,
    broadcaster: Broadcaster,
    actor: User | None = None,
    message: str | None = None,
) -> Notification:
    """Persist a notification and push it to the recipient's channel.

    ``actor`` is None for system-originated notifications. When no message is
    given one is built from the trigger and the actor's display name.
    """
    if message is None:
        message = triggers.default_message(trigger, actor.display_name if actor else "Someone")
    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor.id if actor else None,
        type=triggers.notification_type(trigger),
        message=message[:255],
        context=triggers.metadata(trigger),
        read=False,
        **triggers.soft_references(trigger),
    )
    db.add(notification)
    await db.flush()
    notification.actor = actor

    await broadcaster.emit_notification(recipient_id, notification_payload(notification))
    return notification


async def get_for_user(
    user_id: UUID, db: AsyncSession, limit: int = DEFAULT_LIMIT
) -> list[Notification]:
    rows = await db.execute(
        select(Notification)
        .where(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    return list(rows.scalars().all())


async def unread_count(user_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
    )
    return result.scalar_one()


async def mark_as_read(user_id: UUID, notification_id: UUID, db: AsyncSession) -> bool:
    """Returns False when the notification does not exist or belongs to someone else."""
    notification = await db.get(Notification, notification_id)
    if notification is None or notification.recipient_id != user_id:
        return False
    notification.read = True
    await db.flush()
    return True


async def mark_all_as_read(user_id: UUID, db: AsyncSession) -> int:
    """Flip every unread notification of ``user_id``; returns how many changed."""
    result = await db.execute(
        update(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    return result.rowcount


# ---------------------------------------------------------------------------
# Compensating deletes
# ---------------------------------------------------------------------------


async def _delete_matching(db: AsyncSession, broadcaster: Broadcaster, *criteria) -> int:
    rows = await db.execute(select(Notification).where(*criteria))
    doomed = list(rows.scalars().all())
    for notification in doomed:
        await db.delete(notification)
    await db.flush()

    for notification in doomed:
        await broadcaster.emit_notification_deleted(
            notification.recipient_id, notification.notification_id
        )
    if doomed:
        logger.debug("Deleted %d stale notification(s)", len(doomed))
    return len(doomed)


async def delete_like_notification(
    actor_id: UUID, post_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> int:
    return await _delete_matching(
        db,
        broadcaster,
        Notification.type == NotificationType.LIKE,
        Notification.actor_id == actor_id,
        Notification.post_id == post_id,
    )


async def delete_comment_notifications(
    comment_ids: list[UUID], db: AsyncSession, broadcaster: Broadcaster
) -> int:
    if not comment_ids:
        return 0
    return await _delete_matching(
        db,
        broadcaster,
        Notification.type == NotificationType.COMMENT,
        Notification.comment_id.in_(comment_ids),
    )


async def delete_mention_notification(
    recipient_id: UUID, post_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> int:
    return await _delete_matching(
        db,
        broadcaster,
        Notification.type == NotificationType.MENTION,
        Notification.recipient_id == recipient_id,
        Notification.post_id == post_id,
    )


async def delete_all_mention_notifications_for_post(
    post_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> int:
    return await _delete_matching(
        db,
        broadcaster,
        Notification.type == NotificationType.MENTION,
        Notification.post_id == post_id,
    )


async def delete_engagement_notifications_for_post(
    post_id: UUID, db: AsyncSession, broadcaster: Broadcaster
) -> int:
    """Like and comment notifications that point at ``post_id``."""
    return await _delete_matching(
        db,
        broadcaster,
        Notification.type.in_([NotificationType.LIKE, NotificationType.COMMENT]),
        Notification.post_id == post_id,
    )
