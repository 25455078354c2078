"""Handlers for user accounts and resetting the database."""

from __future__ import annotations

import contextlib
import sqlite3
import sys
from datetime import datetime, timezone
from uuid import uuid4

from gator.commands import Command, CommandError, State
from gator.database import NoRowsError


def handler_users(state: State, command: Command) -> None:
    """List registered users, marking the current one."""
    if command.args:
        print("Parameters ignored: command users takes no parameters")
    try:
        users = state.db.list_users()
    except sqlite3.Error as exc:
        raise CommandError(f"error getting users from database: {exc}") from exc
    if not users:
        print("No users found. Use command register to sign up.")
    for user in users:
        if user.name == state.cfg.current_user_name:
            print(f"* {user.name} (current)")
        else:
            print(f"* {user.name}")


def handler_register(state: State, command: Command) -> None:
    """Create a user and make it the current one."""
    if len(command.args) != 1:
        raise CommandError("error: username required")
    name = command.args[0]

    try:
        state.db.get_user_by_name(name)
    except NoRowsError:
        pass
    except sqlite3.Error as exc:
        raise CommandError(f"database error: {exc}") from exc
    else:
        raise CommandError("error: user already exists")

    now = datetime.now(timezone.utc)
    try:
        user = state.db.create_user(uuid4(), now, now, name)
    except sqlite3.Error as exc:
        raise CommandError(f"error creating user {name}: {exc}") from exc

    with contextlib.suppress(OSError):
        state.cfg.set_user(user.name)

    print(f"User {user.name} successfully created!")
    print(f"ID: {user.id}", file=sys.stderr)
    print(f"Created At: {user.created_at}", file=sys.stderr)
    print(f"Updated At: {user.updated_at}", file=sys.stderr)
    print(f"Name: {user.name}", file=sys.stderr)


def handler_login(state: State, command: Command) -> None:
    """Make an existing user the current one."""
    if len(command.args) != 1:
        raise CommandError("error: username required")
    name = command.args[0]

    try:
        state.db.get_user_by_name(name)
    except NoRowsError:
        raise CommandError("error: user doesn't exist") from None
    except sqlite3.Error as exc:
        raise CommandError(f"database error: {exc}") from exc

    try:
        state.cfg.set_user(name)
    except OSError as exc:
        raise CommandError(str(exc)) from exc

    print(f"User {name} has been successfully set")


def handler_reset(state: State, command: Command) -> None:
    """Delete every user and everything that belongs to one, and log out."""
    try:
        state.db.reset()
    except sqlite3.Error as exc:
        raise CommandError(f"error resetting database: {exc}") from exc
    try:
        state.cfg.set_user("")
    except OSError as exc:
        raise CommandError(f"error resetting current user name: {exc}") from exc
    print("Database successfully reset.")