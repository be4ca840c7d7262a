"""Models for notifications delivered to users."""

from sqlalchemy import BigInteger, Boolean, Index, Integer, SmallInteger
from sqlalchemy.orm import Mapped, mapped_column

from forum_maint.db.session import Base


class Notification(Base):
    """Delivery marker pointing at a post by ``(topic_id, post_number)``."""

    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_topic_id_post_number", "topic_id", "post_number"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    notification_type: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=1)
    topic_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    post_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
