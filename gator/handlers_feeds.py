"""Handlers for feeds, follows, aggregation and browsing posts."""

from __future__ import annotations

import sqlite3
import time
from datetime import datetime, timezone
from uuid import uuid4

from gator.commands import Command, CommandError, State
from gator.database import NoRowsError, UniqueConstraintError
from gator.models import User
from gator.rss import FetchError, fetch_feed
from gator.timeparse import format_duration, parse_duration, parse_time

_DB_ERRORS = (NoRowsError, sqlite3.Error)
_DEFAULT_BROWSE_LIMIT = 2
_ZERO_TIME = "0001-01-01 00:00:00"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def handler_feeds(state: State, command: Command) -> None:
    """List every feed with the name of the user who added it."""
    if command.args:
        print("Parameters ignored: command feeds takes no parameters")
    try:
        feeds = state.db.list_feeds()
    except sqlite3.Error as exc:
        raise CommandError(f"error getting feeds from database: {exc}") from exc
    if not feeds:
        print(
            "No feeds found in database. "
            "Use command addfeed <feed name> <url> to add a new feed."
        )
    for feed in feeds:
        try:
            creator = state.db.get_user_by_id(feed.user_id)
        except _DB_ERRORS as exc:
            raise CommandError(
                f"error getting name of the user that created the feed: {exc}"
            ) from exc
        print(f"Name: {feed.name}")
        print(f"URL: {feed.url}")
        print(f"Created By: {creator.name}")
        print("==============================================")


def handler_add_feed(state: State, command: Command, user: User) -> None:
    """Add a feed and follow it as ``user``."""
    if len(command.args) != 2:
        raise CommandError("must provide feed name and url")
    name, url = command.args

    now = _now()
    try:
        feed = state.db.create_feed(uuid4(), now, now, name, url, user.id)
    except _DB_ERRORS as exc:
        raise CommandError(f"error adding feed to database: {exc}") from exc

    now = _now()
    try:
        state.db.create_feed_follow(uuid4(), now, now, user.id, feed.id)
    except _DB_ERRORS as exc:
        raise CommandError(f"error following created feed: {exc}") from exc

    print(f"ID: {feed.id}")
    print(f"Created At: {feed.created_at}")
    print(f"Updated At: {feed.updated_at}")
    print(f"Name: {feed.name}")
    print(f"URL: {feed.url}")
    print(f"User ID: {feed.user_id}")


def handler_agg(state: State, command: Command) -> None:
    """Scrape the stalest feed now and then once per interval, forever."""
    if len(command.args) != 1:
        raise CommandError("must provide time between requests argument")
    try:
        interval = parse_duration(command.args[0])
    except ValueError as exc:
        raise CommandError(f"error parsing time between requests: {exc}") from exc
    if interval <= 0:
        raise CommandError("non-positive interval for agg")

    print(f"Collecting feeds every {format_duration(interval)}")

    start = time.monotonic()
    tick = 0
    while True:
        try:
            scrape_feeds(state)
        except CommandError as exc:
            print(f"error scraping feed: {exc}")
        tick += 1
        delay = start + tick * interval - time.monotonic()
        if delay > 0:
            time.sleep(delay)
        else:
            # Missed ticks are dropped; the next run starts at once.
            tick = int((time.monotonic() - start) // interval)


def scrape_feeds(state: State) -> None:
    """Fetch the feed fetched longest ago and store its new posts."""
    try:
        next_feed = state.db.get_next_feed_to_fetch()
    except _DB_ERRORS as exc:
        raise CommandError(f"error getting next feed to fetch: {exc}") from exc

    try:
        state.db.mark_feed_fetched(next_feed.id, _now())
    except sqlite3.Error as exc:
        raise CommandError(f"error marking feed as fetched: {exc}") from exc

    try:
        feed = fetch_feed(next_feed.url)
    except FetchError as exc:
        raise CommandError(f"error fetching feed: {exc}") from exc

    for item in feed.channel.items:
        try:
            published = parse_time(item.pub_date)
        except ValueError:
            published = None
        now = _now()
        try:
            state.db.create_post(
                uuid4(),
                now,
                now,
                item.title,
                item.link,
                item.description,
                published,
                next_feed.id,
            )
        except UniqueConstraintError:
            continue
        except sqlite3.Error as exc:
            print(f"error adding post {item.title} to database: {exc}")


def handler_browse(state: State, command: Command, user: User) -> None:
    """Print the newest posts from the user's feeds; the limit defaults to two."""
    limit = _DEFAULT_BROWSE_LIMIT
    if command.args:
        try:
            limit = int(command.args[0])
        except ValueError:
            pass
    if limit < 0:
        raise CommandError("error getting posts for current user: LIMIT must not be negative")

    try:
        posts = state.db.get_posts_for_user(user.id, limit)
    except sqlite3.Error as exc:
        raise CommandError(f"error getting posts for current user: {exc}") from exc

    for post in posts:
        published = (
            post.published_at.strftime("%Y-%m-%d %H:%M:%S")
            if post.published_at is not None
            else _ZERO_TIME
        )
        print(f"Title: {post.title or ''}")
        print(f"URL: {post.url}")
        print(f"Published At: {published}")
        print(f"Description: {post.description or ''}")
        print("================================================================")
        print("")


def handler_follow(state: State, command: Command, user: User) -> None:
    """Follow the feed with the given URL."""
    if len(command.args) != 1:
        raise CommandError("must provide url")
    url = command.args[0]

    try:
        feed = state.db.get_feed_by_url(url)
    except _DB_ERRORS as exc:
        raise CommandError(f"error getting feed from database: {exc}") from exc

    now = _now()
    try:
        followed = state.db.create_feed_follow(uuid4(), now, now, user.id, feed.id)
    except _DB_ERRORS as exc:
        raise CommandError(f"error following feed: {exc}") from exc

    print("Feed successfully followed!")
    print("")
    print(f"Feed Name: {followed.feed_name}")
    print(f"Current User: {followed.user_name}")
    print("=============================================")


def handler_following(state: State, command: Command, user: User) -> None:
    """Print the names of the feeds the user follows."""
    if command.args:
        print("Parameters ignored: command following takes no parameters")
    try:
        follows = state.db.get_feed_follows_for_user(user.id)
    except sqlite3.Error as exc:
        raise CommandError(f"error getting feeds from database: {exc}") from exc
    for follow in follows:
        print(follow.feed_name)
    print("=====================================================")


def handler_unfollow(state: State, command: Command, user: User) -> None:
    """Stop following the feed with the given URL."""
    if len(command.args) != 1:
        raise CommandError("must provide url from feed to unfollow")
    try:
        state.db.unfollow(user.id, command.args[0])
    except sqlite3.Error as exc:
        raise CommandError(f"error unfollowing feed: {exc}") from exc