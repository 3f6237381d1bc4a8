"""File system access used by the configuration code."""

from __future__ import annotations

import glob as _glob
import os
import tempfile
from typing import Protocol


class FileSystem(Protocol):
    """The file operations the configuration code relies on."""

    def read_file(self, path: str) -> bytes:
        """Return the contents of ``path``; raise ``FileNotFoundError`` if missing."""

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        """Write ``data`` to ``path``, creating it with ``mode`` if needed."""

    def exists(self, path: str) -> bool:
        """Tell whether ``path`` exists."""

    def glob(self, pattern: str) -> list[str]:
        """Return the paths matching ``pattern`` in sorted order."""

    def mkdir_all(self, path: str, mode: int = 0o755) -> None:
        """Create ``path`` and any missing parents."""

    def temp_file(self, pattern: str) -> str:
        """Create an empty temporary file and return its name."""

    def remove(self, path: str) -> None:
        """Delete the file at ``path``."""


class LocalFileSystem:
    """A :class:`FileSystem` backed by the real disk."""

    def read_file(self, path: str) -> bytes:
        with open(path, "rb") as handle:
            return handle.read()

    def write_file(self, path: str, data: bytes, mode: int = 0o644) -> None:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def glob(self, pattern: str) -> list[str]:
        return sorted(_glob.glob(pattern))

    def mkdir_all(self, path: str, mode: int = 0o755) -> None:
        os.makedirs(path, mode=mode, exist_ok=True)

    def temp_file(self, pattern: str) -> str:
        # The random part replaces the last "*", or is appended if there is none.
        prefix, star, suffix = pattern.rpartition("*")
        if not star:
            prefix, suffix = pattern, ""
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        os.close(fd)
        return name

    def remove(self, path: str) -> None:
        os.remove(path)