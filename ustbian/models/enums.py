import enum

import sqlalchemy as sa


class NotificationType(str, enum.Enum):
    LIKE = "like"
    FOLLOW = "follow"
    COMMENT = "comment"
    MENTION = "mention"


notification_type_enum = sa.Enum(
    NotificationType,
    name="notification_type",
    values_callable=lambda e: [x.value for x in e],
)
