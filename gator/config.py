"""Reading and writing the user's configuration file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_FILE_NAME = ".gatorconfig.json"


def config_file_path() -> Path:
    """Return the location of the configuration file in the home directory."""
    return Path.home() / CONFIG_FILE_NAME


@dataclass
class Config:
    """Database connection string and the name of the logged-in user."""

    db_url: str = ""
    current_user_name: str = ""
    path: Path | None = field(default=None, compare=False, repr=False)

    def set_user(self, username: str) -> None:
        """Set the current user and persist the configuration."""
        self.current_user_name = username
        self.write()

    def write(self) -> None:
        """Write the configuration as indented JSON."""
        target = self.path if self.path is not None else config_file_path()
        data = {"db_url": self.db_url, "current_user_name": self.current_user_name}
        Path(target).write_text(json.dumps(data, indent=2), encoding="utf-8")


def read_config(path: str | Path | None = None) -> Config:
    """Load the configuration; missing keys take empty values."""
    target = Path(path) if path is not None else config_file_path()
    data = json.loads(target.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("configuration file must hold a JSON object")
    return Config(
        db_url=str(data.get("db_url", "")),
        current_user_name=str(data.get("current_user_name", "")),
        path=target,
    )