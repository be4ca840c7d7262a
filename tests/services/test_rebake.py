"""Tests for the rebake batch loop."""

import logging

import pytest

from forum_maint.services.collaborators import RebakeOptions
from forum_maint.services.errors import CollaboratorError
from forum_maint.services.rebake import rebake_posts


class RecordingRebaker:
    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.calls: list[tuple[int, RebakeOptions]] = []

    def rebake(self, post, options):
        self.calls.append((post.post_number, options))
        if post.post_number in self.fail_on:
            raise CollaboratorError(f"cannot render post {post.post_number}")


@pytest.fixture()
def topic_posts(db_session, make_post):
    for number in range(1, 6):
        make_post(1, number, created_minute=number)
    make_post(2, 1, created_minute=1)
    make_post(1, 6, created_minute=6, deleted=True)
    db_session.commit()


def test_rebakes_every_live_post(db_session, topic_posts, test_settings):
    rebaker = RecordingRebaker()

    result = rebake_posts(db_session, rebaker, base_settings=test_settings)

    assert result.processed == 6
    assert result.failed == 0
    assert len(rebaker.calls) == 6


def test_topic_filter_and_small_batches(db_session, topic_posts, test_settings):
    rebaker = RecordingRebaker()
    small_batches = test_settings.model_copy(update={"rebake_batch_size": 2})

    result = rebake_posts(db_session, rebaker, topic_id=1, base_settings=small_batches)

    assert result.processed == 5
    assert [number for number, _ in rebaker.calls] == [1, 2, 3, 4, 5]


def test_failures_are_logged_and_skipped(db_session, topic_posts, test_settings, caplog):
    rebaker = RecordingRebaker(fail_on={2, 4})

    with caplog.at_level(logging.WARNING, logger="forum_maint.services.rebake"):
        result = rebake_posts(db_session, rebaker, topic_id=1, base_settings=test_settings)

    assert result.processed == 3
    assert result.failed == 2
    assert "topic=1 post_number=2" in caplog.text
    assert "topic=1 post_number=4" in caplog.text


def test_notifications_disabled_only_for_the_run(db_session, topic_posts, test_settings):
    rebaker = RecordingRebaker()

    rebake_posts(
        db_session,
        rebaker,
        topic_id=2,
        invalidate_oneboxes=True,
        base_settings=test_settings,
    )

    (_, options), = rebaker.calls
    assert options.settings.disable_edit_notifications is True
    assert options.invalidate_oneboxes is True
    assert options.invalidate_broken_images is False
    assert test_settings.disable_edit_notifications is False


def test_unexpected_errors_propagate(db_session, topic_posts, test_settings, mocker):
    rebaker = mocker.Mock()
    rebaker.rebake.side_effect = MemoryError

    with pytest.raises(MemoryError):
        rebake_posts(db_session, rebaker, base_settings=test_settings)
