"""Reading and writing the individual TOML config files of a directory."""

from __future__ import annotations

import os
import tomllib
from dataclasses import fields
from typing import Any, Callable, TypeVar

import tomli_w

from .filesystem import FileSystem
from .loader import global_config_dir
from .models import Agent, Context, Role, Settings, Task

T = TypeVar("T")


class TomlFileError(Exception):
    """Raised when a config file cannot be read, parsed or written."""


class _SchemaError(ValueError):
    """A value in a TOML document has the wrong shape."""


_CHECKS: dict[str, Callable[[Any], bool]] = {
    "str": lambda v: isinstance(v, str),
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "bool": lambda v: isinstance(v, bool),
    "dict[str, str]": lambda v: isinstance(v, dict)
    and all(isinstance(x, str) for x in v.values()),
}


def _from_table(cls: Callable[..., T], table: Any, where: str) -> T:
    """Build a dataclass from a TOML table, ignoring unknown keys and ``name``."""
    if not isinstance(table, dict):
        raise _SchemaError(f"{where}: expected a table")
    kinds = {f.name: f.type for f in fields(cls) if f.name != "name"}
    values = {}
    for key, value in table.items():
        kind = kinds.get(key)
        if kind is None:
            continue
        check = _CHECKS.get(kind)
        if check is not None and not check(value):
            raise _SchemaError(f"{where}.{key}: expected {kind}, got {type(value).__name__}")
        values[key] = dict(value) if isinstance(value, dict) else value
    return cls(**values)


def _to_table(item: Any) -> dict[str, Any]:
    return {
        f.name: dict(value) if isinstance(value := getattr(item, f.name), dict) else value
        for f in fields(item)
        if f.name != "name"
    }


class TomlHelper:
    """Reads and writes ``config.toml``, ``agents.toml``, ``roles.toml``,
    ``contexts.toml`` and ``tasks.toml`` one file at a time."""

    def __init__(self, fs: FileSystem):
        self.fs = fs

    # -- generic plumbing -------------------------------------------------

    def _load_document(self, path: str, label: str) -> dict | None:
        try:
            data = self.fs.read_file(path)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise TomlFileError(f"failed to read {label} file: {exc}") from exc
        try:
            return tomllib.loads(data.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise TomlFileError(f"failed to parse {label} file: {exc}") from exc

    def _read_section(self, directory: str, filename: str, label: str, section: str, cls):
        document = self._load_document(os.path.join(directory, filename), label)
        if document is None:
            return {}
        try:
            table = document.get(section, {})
            if not isinstance(table, dict):
                raise _SchemaError(f"{section}: expected a table")
            result = {}
            for name, entry in table.items():
                item = _from_table(cls, entry, f"{section}.{name}")
                item.name = name
                result[name] = item
            return result
        except _SchemaError as exc:
            raise TomlFileError(f"failed to parse {label} file: {exc}") from exc

    def _write_document(self, directory: str, filename: str, label: str, document: dict) -> None:
        try:
            self.fs.mkdir_all(directory, 0o755)
        except OSError as exc:
            raise TomlFileError(f"failed to create directory: {exc}") from exc
        try:
            data = tomli_w.dumps(document).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise TomlFileError(f"failed to marshal {label}: {exc}") from exc
        try:
            self.fs.write_file(os.path.join(directory, filename), data, 0o644)
        except OSError as exc:
            raise TomlFileError(f"failed to write {label} file: {exc}") from exc

    def _write_section(self, directory, filename, label, section, items) -> None:
        document = {section: {name: _to_table(item) for name, item in items.items()}}
        self._write_document(directory, filename, label, document)

    # -- agents -----------------------------------------------------------

    def read_agents(self, directory: str) -> dict[str, Agent]:
        """Return the agents of ``agents.toml``; empty if the file is missing."""
        return self._read_section(directory, "agents.toml", "agents", "agents", Agent)

    def write_agents(self, directory: str, agents: dict[str, Agent]) -> None:
        """Write ``agents`` to ``agents.toml``, creating the directory if needed."""
        self._write_section(directory, "agents.toml", "agents", "agents", agents)

    # -- settings ---------------------------------------------------------

    def read_settings(self, directory: str) -> Settings:
        """Return the ``[settings]`` of ``config.toml``; defaults if the file is missing."""
        document = self._load_document(self.config_path(directory), "config")
        if document is None:
            return Settings()
        try:
            return _from_table(Settings, document.get("settings", {}), "settings")
        except _SchemaError as exc:
            raise TomlFileError(f"failed to parse config file: {exc}") from exc

    def write_settings(self, directory: str, settings: Settings) -> None:
        """Write ``settings`` to ``config.toml``, creating the directory if needed."""
        self._write_document(
            directory, "config.toml", "config", {"settings": _to_table(settings)}
        )

    # -- roles ------------------------------------------------------------

    def read_roles(self, directory: str) -> dict[str, Role]:
        """Return the roles of ``roles.toml``; empty if the file is missing."""
        return self._read_section(directory, "roles.toml", "roles", "roles", Role)

    def write_roles(self, directory: str, roles: dict[str, Role]) -> None:
        """Write ``roles`` to ``roles.toml``, creating the directory if needed."""
        self._write_section(directory, "roles.toml", "roles", "roles", roles)

    # -- contexts ---------------------------------------------------------

    def read_contexts(self, directory: str) -> dict[str, Context]:
        """Return the contexts of ``contexts.toml``; empty if the file is missing."""
        return self._read_section(directory, "contexts.toml", "contexts", "contexts", Context)

    def write_contexts(self, directory: str, contexts: dict[str, Context]) -> None:
        """Write ``contexts`` to ``contexts.toml``, creating the directory if needed."""
        self._write_section(directory, "contexts.toml", "contexts", "contexts", contexts)

    # -- tasks ------------------------------------------------------------

    def read_tasks(self, directory: str) -> dict[str, Task]:
        """Return the tasks of ``tasks.toml``; empty if the file is missing."""
        return self._read_section(directory, "tasks.toml", "tasks", "tasks", Task)

    def write_tasks(self, directory: str, tasks: dict[str, Task]) -> None:
        """Write ``tasks`` to ``tasks.toml``, creating the directory if needed."""
        self._write_section(directory, "tasks.toml", "tasks", "tasks", tasks)

    # -- locations --------------------------------------------------------

    def global_dir(self) -> str:
        """Return the global config directory, ``~/.config/start``."""
        return global_config_dir()

    def local_dir(self, work_dir: str) -> str:
        """Return the local config directory of ``work_dir``."""
        return os.path.join(work_dir, ".start")

    def config_path(self, directory: str) -> str:
        """Return the path of ``config.toml`` in ``directory``."""
        return os.path.join(directory, "config.toml")