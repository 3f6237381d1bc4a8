"""Timestamped backups of configuration files."""

from __future__ import annotations

import os
from datetime import datetime
from typing import Callable

from .filesystem import FileSystem


class BackupError(Exception):
    """Raised when a backup cannot be made."""


class BackupHelper:
    """Creates ``<name>.YYYY-MM-DD-HHMMSS.toml`` copies of config files."""

    def __init__(self, fs: FileSystem, clock: Callable[[], datetime] = datetime.now):
        self.fs = fs
        self._clock = clock

    def create_backup(self, config_path: str) -> str:
        """Copy ``config_path`` next to itself with a timestamp and return the copy's path."""
        if not self.fs.exists(config_path):
            raise BackupError(f"config file does not exist: {config_path}")

        try:
            data = self.fs.read_file(config_path)
        except OSError as exc:
            raise BackupError(f"failed to read config file: {exc}") from exc

        timestamp = self._clock().strftime("%Y-%m-%d-%H%M%S")
        directory, base = os.path.split(config_path)
        if base.endswith(".toml"):
            base = base[: -len(".toml")]

        backup_path = os.path.join(directory, f"{base}.{timestamp}.toml")
        try:
            self.fs.write_file(backup_path, data, 0o644)
        except OSError as exc:
            raise BackupError(f"failed to write backup file: {exc}") from exc

        return backup_path