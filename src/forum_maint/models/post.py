"""SQLAlchemy model for posts."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from forum_maint.db.session import Base
from forum_maint.db.time import utcnow


class Post(Base):
    """A numbered entry within a topic.

    ``post_number`` is the position readers and other records refer to. It is
    unique per topic among posts that are not deleted, which the partial index
    below enforces row by row.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index(
            "ix_posts_topic_id_post_number",
            "topic_id",
            "post_number",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("NOT deleted"),
        ),
        Index("ix_posts_topic_id_created_at", "topic_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Topics have no table of their own here; the id only groups posts.
    topic_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    post_number: Mapped[int] = mapped_column(Integer, nullable=False)
    # Staging column written by renumbering; stale otherwise.
    sort_order: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Not a foreign key: may point at a number no post holds any more.
    reply_to_post_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    raw: Mapped[str] = mapped_column(Text, nullable=False, default="")
    cooked: Mapped[str | None] = mapped_column(Text, nullable=True)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    deleted: Mapped[bool] = mapped_column(default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Post id={self.id} topic={self.topic_id} #{self.post_number}>"
