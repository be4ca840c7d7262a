# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from forum_maint.core.settings import Settings
from forum_maint.db.session import Base
from forum_maint.models import Notification, Post, PostTiming, TopicUser

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Renumbering commits, so every test cleans up the real tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(_env_file=None)


def minutes(offset: int) -> datetime:
    """Return a creation instant ``offset`` minutes after the base time."""
    return BASE_TIME + timedelta(minutes=offset)


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory adding a post and flushing it."""

    def _make_post(
        topic_id: int,
        post_number: int,
        created_minute: int,
        *,
        reply_to: int | None = None,
        deleted: bool = False,
        raw: str = "",
    ) -> Post:
        post = Post(
            topic_id=topic_id,
            post_number=post_number,
            sort_order=post_number,
            reply_to_post_number=reply_to,
            raw=raw or f"post {post_number} of topic {topic_id}",
            created_at=minutes(created_minute),
            deleted=deleted,
        )
        db_session.add(post)
        db_session.flush()
        return post

    return _make_post


@pytest.fixture()
def make_references(db_session: Session) -> Callable[..., tuple[Notification, PostTiming, TopicUser]]:
    """Return a factory adding one of each referencing record for a post number."""

    def _make_references(
        topic_id: int,
        post_number: int,
        user_id: int,
    ) -> tuple[Notification, PostTiming, TopicUser]:
        notification = Notification(user_id=user_id, topic_id=topic_id, post_number=post_number)
        timing = PostTiming(topic_id=topic_id, post_number=post_number, user_id=user_id, msecs=100)
        topic_user = TopicUser(
            user_id=user_id,
            topic_id=topic_id,
            last_read_post_number=post_number,
            last_emailed_post_number=post_number,
        )
        db_session.add_all([notification, timing, topic_user])
        db_session.flush()
        return notification, timing, topic_user

    return _make_references
