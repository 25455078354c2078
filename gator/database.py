"""SQLite-backed storage for users, feeds, follows and posts."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from uuid import UUID

from gator.models import Feed, FeedFollowRow, Post, User


class NoRowsError(LookupError):
    """A query that must return one row found none."""


class UniqueConstraintError(sqlite3.IntegrityError):
    """An insert collided with an existing unique value."""


_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    name TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS feeds (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    name TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    user_id TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    last_fetched_at TEXT
);
CREATE TABLE IF NOT EXISTS feed_follows (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    user_id TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    feed_id TEXT NOT NULL REFERENCES feeds (id) ON DELETE CASCADE,
    UNIQUE (user_id, feed_id)
);
CREATE TABLE IF NOT EXISTS posts (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    title TEXT,
    url TEXT NOT NULL UNIQUE,
    description TEXT,
    published_at TEXT,
    feed_id TEXT NOT NULL REFERENCES feeds (id) ON DELETE CASCADE
);
"""

_USER_COLUMNS = "id, created_at, updated_at, name"
_FEED_COLUMNS = "id, created_at, updated_at, name, url, user_id, last_fetched_at"
_POST_COLUMNS = "id, created_at, updated_at, title, url, description, published_at, feed_id"


def _ts(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


def _dt(text: str | None) -> datetime | None:
    return None if text is None else datetime.fromisoformat(text)


def _user(row: tuple) -> User:
    return User(UUID(row[0]), _dt(row[1]), _dt(row[2]), row[3])


def _feed(row: tuple) -> Feed:
    return Feed(
        id=UUID(row[0]),
        created_at=_dt(row[1]),
        updated_at=_dt(row[2]),
        name=row[3],
        url=row[4],
        user_id=UUID(row[5]),
        last_fetched_at=_dt(row[6]),
    )


def _follow_row(row: tuple) -> FeedFollowRow:
    return FeedFollowRow(
        id=UUID(row[0]),
        created_at=_dt(row[1]),
        updated_at=_dt(row[2]),
        user_id=UUID(row[3]),
        feed_id=UUID(row[4]),
        feed_name=row[5],
        user_name=row[6],
    )


def _post(row: tuple) -> Post:
    return Post(
        id=UUID(row[0]),
        created_at=_dt(row[1]),
        updated_at=_dt(row[2]),
        title=row[3],
        url=row[4],
        description=row[5],
        published_at=_dt(row[6]),
        feed_id=UUID(row[7]),
    )


class Queries:
    """The application's queries over one database connection."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection
        self._conn.execute("PRAGMA foreign_keys = ON")

    def __enter__(self) -> Queries:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.IntegrityError as exc:
            if "UNIQUE constraint failed" in str(exc):
                raise UniqueConstraintError(str(exc)) from exc
            raise

    def _one(self, sql: str, params: tuple = ()) -> tuple:
        row = self._execute(sql, params).fetchone()
        if row is None:
            raise NoRowsError("no rows in result set")
        return row

    def create_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        self._conn.executescript(_SCHEMA)

    @contextmanager
    def transaction(self) -> Iterator[Queries]:
        """Run the enclosed queries atomically; roll back on error."""
        self._conn.execute("BEGIN")
        try:
            yield self
        except BaseException:
            self._conn.execute("ROLLBACK")
            raise
        self._conn.execute("COMMIT")

    # users

    def create_user(self, id: UUID, created_at: datetime, updated_at: datetime, name: str) -> User:
        self._execute(
            "INSERT INTO users (id, created_at, updated_at, name) VALUES (?, ?, ?, ?)",
            (str(id), _ts(created_at), _ts(updated_at), name),
        )
        return self.get_user_by_id(id)

    def get_user_by_id(self, id: UUID) -> User:
        return _user(self._one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (str(id),)))

    def get_user_by_name(self, name: str) -> User:
        return _user(self._one(f"SELECT {_USER_COLUMNS} FROM users WHERE name = ?", (name,)))

    def list_users(self) -> list[User]:
        return [_user(r) for r in self._execute(f"SELECT {_USER_COLUMNS} FROM users")]

    def reset(self) -> None:
        """Delete every user and, by cascade, everything that depends on one."""
        self._execute("DELETE FROM users")

    # feeds

    def create_feed(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        name: str,
        url: str,
        user_id: UUID,
    ) -> Feed:
        self._execute(
            "INSERT INTO feeds (id, created_at, updated_at, name, url, user_id) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (str(id), _ts(created_at), _ts(updated_at), name, url, str(user_id)),
        )
        return _feed(self._one(f"SELECT {_FEED_COLUMNS} FROM feeds WHERE id = ?", (str(id),)))

    def get_feed_by_name(self, name: str) -> Feed:
        return _feed(self._one(f"SELECT {_FEED_COLUMNS} FROM feeds WHERE name = ?", (name,)))

    def get_feed_by_url(self, url: str) -> Feed:
        return _feed(self._one(f"SELECT {_FEED_COLUMNS} FROM feeds WHERE url = ?", (url,)))

    def list_feeds(self) -> list[Feed]:
        return [_feed(r) for r in self._execute(f"SELECT {_FEED_COLUMNS} FROM feeds")]

    def get_next_feed_to_fetch(self) -> Feed:
        """Return the feed fetched longest ago, never-fetched feeds first."""
        return _feed(
            self._one(
                f"SELECT {_FEED_COLUMNS} FROM feeds "
                "ORDER BY last_fetched_at IS NOT NULL, last_fetched_at ASC LIMIT 1"
            )
        )

    def mark_feed_fetched(self, id: UUID, last_fetched_at: datetime | None) -> None:
        stamp = _ts(last_fetched_at)
        self._execute(
            "UPDATE feeds SET last_fetched_at = ?, updated_at = COALESCE(?, updated_at) "
            "WHERE id = ?",
            (stamp, stamp, str(id)),
        )

    # follows

    def create_feed_follow(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        user_id: UUID,
        feed_id: UUID,
    ) -> FeedFollowRow:
        self._execute(
            "INSERT INTO feed_follows (id, created_at, updated_at, user_id, feed_id) "
            "VALUES (?, ?, ?, ?, ?)",
            (str(id), _ts(created_at), _ts(updated_at), str(user_id), str(feed_id)),
        )
        return _follow_row(
            self._one(
                "SELECT ff.id, ff.created_at, ff.updated_at, ff.user_id, ff.feed_id, "
                "feeds.name, users.name FROM feed_follows AS ff "
                "JOIN feeds ON ff.feed_id = feeds.id "
                "JOIN users ON ff.user_id = users.id "
                "WHERE ff.id = ?",
                (str(id),),
            )
        )

    def get_feed_follows_for_user(self, user_id: UUID) -> list[FeedFollowRow]:
        rows = self._execute(
            "SELECT ff.id, ff.created_at, ff.updated_at, ff.user_id, ff.feed_id, "
            "feeds.name, users.name FROM feed_follows AS ff "
            "JOIN feeds ON ff.feed_id = feeds.id "
            "JOIN users ON ff.user_id = users.id "
            "WHERE ff.user_id = ?",
            (str(user_id),),
        )
        return [_follow_row(r) for r in rows]

    def unfollow(self, user_id: UUID, url: str) -> None:
        self._execute(
            "DELETE FROM feed_follows WHERE user_id = ? AND feed_id = "
            "(SELECT id FROM feeds WHERE url = ?)",
            (str(user_id), url),
        )

    # posts

    def create_post(
        self,
        id: UUID,
        created_at: datetime,
        updated_at: datetime,
        title: str | None,
        url: str,
        description: str | None,
        published_at: datetime | None,
        feed_id: UUID,
    ) -> Post:
        self._execute(
            "INSERT INTO posts (id, created_at, updated_at, title, url, description, "
            "published_at, feed_id) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                str(id),
                _ts(created_at),
                _ts(updated_at),
                title,
                url,
                description,
                _ts(published_at),
                str(feed_id),
            ),
        )
        return _post(self._one(f"SELECT {_POST_COLUMNS} FROM posts WHERE id = ?", (str(id),)))

    def get_posts_for_user(self, user_id: UUID, limit: int) -> list[Post]:
        """Newest posts from the feeds the user created, at most ``limit``."""
        rows = self._execute(
            f"SELECT {_POST_COLUMNS} FROM posts "
            "WHERE feed_id IN (SELECT id FROM feeds WHERE user_id = ?) "
            "ORDER BY created_at DESC LIMIT ?",
            (str(user_id), limit),
        )
        return [_post(r) for r in rows]


def _sqlite_path(url: str) -> str:
    if url.startswith("sqlite://"):
        path = url[len("sqlite://"):]
        if path.startswith("/"):
            path = path[1:]
        return path or ":memory:"
    if "://" in url:
        raise ValueError(f"unsupported database url {url!r}")
    return url


def connect(url: str | Path) -> Queries:
    """Open the database at ``url`` (a path or sqlite:// URL) and ensure its schema."""
    path = _sqlite_path(str(url))
    conn = sqlite3.connect(path, isolation_level=None)
    queries = Queries(conn)
    queries.create_schema()
    return queries