"""Tests for ranking posts by creation time."""

from forum_maint.services.post_ordering import PostRank, resolve_ordering


def test_targets_follow_creation_time(db_session, make_post):
    make_post(1, 3, created_minute=1)
    make_post(1, 1, created_minute=2)
    make_post(1, 2, created_minute=3)

    ranks = resolve_ordering(db_session, 1)

    assert [(r.post_number, r.target_number) for r in ranks] == [(3, 1), (1, 2), (2, 3)]
    assert all(r.moves for r in ranks)


def test_ties_broken_by_current_number(db_session, make_post):
    make_post(1, 7, created_minute=5)
    make_post(1, 4, created_minute=5)
    make_post(1, 2, created_minute=9)

    ranks = resolve_ordering(db_session, 1)

    assert [(r.post_number, r.target_number) for r in ranks] == [(4, 1), (7, 2), (2, 3)]


def test_gaps_are_closed_into_dense_range(db_session, make_post):
    make_post(1, 2, created_minute=1)
    make_post(1, 10, created_minute=2)
    make_post(1, 40, created_minute=3)

    ranks = resolve_ordering(db_session, 1)

    assert [r.target_number for r in ranks] == [1, 2, 3]
    assert [r.moves for r in ranks] == [True, True, True]


def test_deleted_posts_are_not_ranked(db_session, make_post):
    make_post(1, 1, created_minute=1)
    make_post(1, 2, created_minute=2, deleted=True)
    make_post(1, 3, created_minute=3)

    ranks = resolve_ordering(db_session, 1)

    assert [(r.post_number, r.target_number) for r in ranks] == [(1, 1), (3, 2)]


def test_each_topic_ranked_separately(db_session, make_post):
    make_post(1, 1, created_minute=1)
    make_post(2, 1, created_minute=2)
    make_post(2, 2, created_minute=0)

    ranks = resolve_ordering(db_session)

    assert {(r.topic_id, r.post_number): r.target_number for r in ranks} == {
        (1, 1): 1,
        (2, 1): 2,
        (2, 2): 1,
    }
    assert [r.topic_id for r in resolve_ordering(db_session, 2)] == [2, 2]


def test_post_already_in_place_does_not_move():
    rank = PostRank(post_id=1, topic_id=1, post_number=2, target_number=2)

    assert rank.moves is False
