"""Records stored in the database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class User:
    id: UUID
    created_at: datetime
    updated_at: datetime
    name: str


@dataclass
class Feed:
    id: UUID
    created_at: datetime
    updated_at: datetime
    name: str
    url: str
    user_id: UUID
    last_fetched_at: datetime | None = None


@dataclass
class FeedFollow:
    id: UUID
    created_at: datetime
    updated_at: datetime
    user_id: UUID
    feed_id: UUID


@dataclass
class FeedFollowRow:
    """A follow joined with the names of its feed and user."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    user_id: UUID
    feed_id: UUID
    feed_name: str
    user_name: str


@dataclass
class Post:
    id: UUID
    created_at: datetime
    updated_at: datetime
    title: str | None
    url: str
    description: str | None
    published_at: datetime | None
    feed_id: UUID