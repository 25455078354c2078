"""Command-line entry point."""

from __future__ import annotations

import sqlite3
import sys
from collections.abc import Sequence

from gator.commands import Command, CommandError, Commands, State, middleware_logged_in
from gator.config import read_config
from gator.database import connect
from gator.handlers_feeds import (
    handler_add_feed,
    handler_agg,
    handler_browse,
    handler_feeds,
    handler_follow,
    handler_following,
    handler_unfollow,
)
from gator.handlers_users import handler_login, handler_register, handler_reset, handler_users


def build_commands() -> Commands:
    """Return the registry of every command the program knows."""
    commands = Commands()
    commands.register("login", handler_login)
    commands.register("register", handler_register)
    commands.register("reset", handler_reset)
    commands.register("users", handler_users)
    commands.register("agg", handler_agg)
    commands.register("addfeed", middleware_logged_in(handler_add_feed))
    commands.register("feeds", handler_feeds)
    commands.register("follow", middleware_logged_in(handler_follow))
    commands.register("following", middleware_logged_in(handler_following))
    commands.register("unfollow", middleware_logged_in(handler_unfollow))
    commands.register("browse", middleware_logged_in(handler_browse))
    return commands


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command; return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    try:
        cfg = read_config()
    except (OSError, ValueError) as exc:
        print(f"Error reading config file: {exc}", file=sys.stderr)
        return 1

    try:
        db = connect(cfg.db_url)
    except (ValueError, sqlite3.Error) as exc:
        print(f"Error connecting to database: {exc}", file=sys.stderr)
        return 1

    with db:
        if not args:
            print("Error: not enough arguments", file=sys.stderr)
            return 1
        state = State(db=db, cfg=cfg)
        try:
            build_commands().run(state, Command(args[0], args[1:]))
        except CommandError as exc:
            print(exc, file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())