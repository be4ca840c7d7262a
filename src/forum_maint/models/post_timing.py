"""Models recording how long users spent reading posts."""

from sqlalchemy import BigInteger, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from forum_maint.db.session import Base


class PostTiming(Base):
    """Read-position marker for one user on one post."""

    __tablename__ = "post_timings"
    # Non-unique: a stale number may coincide with one a post is renumbered to.
    __table_args__ = (
        Index("ix_post_timings_topic_id_post_number_user_id", "topic_id", "post_number", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    post_number: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    msecs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
