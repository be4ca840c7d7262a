"""Models capturing likes and flags on posts."""

from enum import StrEnum

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from forum_maint.db.session import Base


class PostActionType(StrEnum):
    """Kinds of actions users take on posts."""

    LIKE = "like"
    OFF_TOPIC = "off_topic"
    INAPPROPRIATE = "inappropriate"
    SPAM = "spam"
    NOTIFY_MODERATORS = "notify_moderators"

    @classmethod
    def flag_types(cls) -> tuple["PostActionType", ...]:
        """Return every action type that counts as a flag."""
        return tuple(member for member in cls if member is not cls.LIKE)


class PostAction(Base):
    """Per-user action on a post."""

    __tablename__ = "post_actions"
    __table_args__ = (Index("ix_post_actions_post_id", "post_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    action_type: Mapped[str] = mapped_column(String(32), nullable=False)
