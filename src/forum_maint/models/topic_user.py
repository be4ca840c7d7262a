"""Per-user topic state."""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import Mapped, mapped_column

from forum_maint.db.session import Base


class TopicUser(Base):
    """High-water marks a user has reached within a topic."""

    __tablename__ = "topic_users"

    user_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    topic_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    last_read_post_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_emailed_post_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
