from datetime import datetime, timezone
from uuid import uuid4

from gator.models import Feed, FeedFollow, FeedFollowRow, Post, User

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_feed_last_fetched_defaults_none():
    feed = Feed(uuid4(), NOW, NOW, "n", "u", uuid4())
    assert feed.last_fetched_at is None


def test_user_equality():
    uid = uuid4()
    assert User(uid, NOW, NOW, "a") == User(uid, NOW, NOW, "a")
    assert User(uid, NOW, NOW, "a") != User(uid, NOW, NOW, "b")


def test_follow_row_fields():
    u, f = uuid4(), uuid4()
    row = FeedFollowRow(uuid4(), NOW, NOW, u, f, "feed", "user")
    assert (row.user_id, row.feed_id, row.feed_name, row.user_name) == (u, f, "feed", "user")


def test_feed_follow_and_post():
    f = uuid4()
    follow = FeedFollow(uuid4(), NOW, NOW, uuid4(), f)
    post = Post(uuid4(), NOW, NOW, None, "u", None, None, f)
    assert post.feed_id == follow.feed_id
    assert post.title is None