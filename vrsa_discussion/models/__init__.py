from vrsa_discussion.models.comment import PostComment
from vrsa_discussion.models.notification import Notification, NotificationType
from vrsa_discussion.models.profile import Profile

__all__ = [
    "Profile",
    "PostComment",
    "Notification",
    "NotificationType",
]
