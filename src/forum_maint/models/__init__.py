"""SQLAlchemy models for forum posts and the records that point at them."""

from .notification import Notification
from .post import Post
from .post_action import PostAction, PostActionType
from .post_timing import PostTiming
from .topic_user import TopicUser

__all__ = [
    "Notification",
    "Post",
    "PostAction", "PostActionType",
    "PostTiming",
    "TopicUser",
]
