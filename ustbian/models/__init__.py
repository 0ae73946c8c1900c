from ustbian.models.comment import Comment
from ustbian.models.enums import NotificationType
from ustbian.models.follow import Follow
from ustbian.models.interaction import Like, SavedPost
from ustbian.models.notification import Notification
from ustbian.models.post import Post
from ustbian.models.user import User

__all__ = [
    "User",
    "Post",
    "Comment",
    "Like",
    "SavedPost",
    "Follow",
    "Notification",
    "NotificationType",
]
