"""Command registry and the state that handlers run against."""

from __future__ import annotations

import functools
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass, field

from gator.config import Config
from gator.database import NoRowsError, Queries
from gator.models import User


class CommandError(Exception):
    """A command failed; the message is meant for the user."""


@dataclass
class State:
    """What every handler needs: the database and the configuration."""

    db: Queries
    cfg: Config


@dataclass
class Command:
    """A command name and its arguments as typed on the command line."""

    name: str
    args: list[str] = field(default_factory=list)


Handler = Callable[[State, Command], None]
UserHandler = Callable[[State, Command, User], None]


@dataclass
class Commands:
    """Named handlers, looked up when a command is run."""

    handlers: dict[str, Handler] = field(default_factory=dict)

    def register(self, name: str, handler: Handler) -> None:
        """Bind ``handler`` to the command ``name``, replacing any earlier one."""
        self.handlers[name] = handler

    def run(self, state: State, command: Command) -> None:
        """Run the handler registered for ``command.name``."""
        try:
            handler = self.handlers[command.name]
        except KeyError:
            raise CommandError(f"command {command.name} not found") from None
        handler(state, command)


def middleware_logged_in(handler: UserHandler) -> Handler:
    """Wrap a handler so that it receives the logged-in user."""

    @functools.wraps(handler)
    def wrapped(state: State, command: Command) -> None:
        try:
            user = state.db.get_user_by_name(state.cfg.current_user_name)
        except (NoRowsError, sqlite3.Error) as exc:
            raise CommandError(f"error retrieving user from database: {exc}") from exc
        handler(state, command, user)

    return wrapped