"""Notification triggers.

A notification references the content that caused it only through soft
columns (no foreign key), so each notification kind is modelled as its own
trigger type. Everything that needs to know what a notification points at
(the client-facing metadata, the soft-reference columns, the message text)
dispatches on the trigger type here and nowhere else.
"""

from dataclasses import dataclass
from typing import Any, Union
from uuid import UUID

from ustbian.models.enums import NotificationType

_MESSAGE_MAX = 255


@dataclass(frozen=True)
class LikeTrigger:
    post_id: UUID


@dataclass(frozen=True)
class FollowTrigger:
    follower_id: UUID


@dataclass(frozen=True)
class CommentTrigger:
    post_id: UUID
    comment_id: UUID


@dataclass(frozen=True)
class MentionTrigger:
    post_id: UUID


Trigger = Union[LikeTrigger, FollowTrigger, CommentTrigger, MentionTrigger]


def notification_type(trigger: Trigger) -> NotificationType:
    if isinstance(trigger, LikeTrigger):
        return NotificationType.LIKE
    if isinstance(trigger, FollowTrigger):
        return NotificationType.FOLLOW
    if isinstance(trigger, CommentTrigger):
        return NotificationType.COMMENT
    if isinstance(trigger, MentionTrigger):
        return NotificationType.MENTION
    raise TypeError(f"Unknown notification trigger: {trigger!r}")


def metadata(trigger: Trigger) -> dict[str, Any]:
    """Open key/value map exposed to clients alongside the notification."""
    if isinstance(trigger, (LikeTrigger, MentionTrigger)):
        return {"postId": str(trigger.post_id)}
    if isinstance(trigger, CommentTrigger):
        return {"postId": str(trigger.post_id), "commentId": str(trigger.comment_id)}
    if isinstance(trigger, FollowTrigger):
        return {"followerId": str(trigger.follower_id)}
    raise TypeError(f"Unknown notification trigger: {trigger!r}")


def soft_references(trigger: Trigger) -> dict[str, UUID | None]:
    """Values for the indexed ``post_id`` / ``comment_id`` columns."""
    if isinstance(trigger, (LikeTrigger, MentionTrigger)):
        return {"post_id": trigger.post_id, "comment_id": None}
    if isinstance(trigger, CommentTrigger):
        return {"post_id": trigger.post_id, "comment_id": trigger.comment_id}
    if isinstance(trigger, FollowTrigger):
        return {"post_id": None, "comment_id": None}
    raise TypeError(f"Unknown notification trigger: {trigger!r}")


def default_message(trigger: Trigger, actor_name: str) -> str:
    if isinstance(trigger, LikeTrigger):
        text = f"{actor_name} liked your post"
    elif isinstance(trigger, FollowTrigger):
        text = f"{actor_name} started following you"
    elif isinstance(trigger, CommentTrigger):
        text = f"{actor_name} commented on your post"
    elif isinstance(trigger, MentionTrigger):
        text = f"{actor_name} mentioned you in a post"
    else:
        raise TypeError(f"Unknown notification trigger: {trigger!r}")
    return text[:_MESSAGE_MAX]
