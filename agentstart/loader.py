"""Loading configuration from the global and local config directories."""

from __future__ import annotations

import os
import tomllib
from dataclasses import fields
from typing import Any, Callable, TypeVar

from .filesystem import FileSystem
from .models import Agent, Config, Context, Role, Settings, Task

T = TypeVar("T")


class ConfigLoadError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


class _SchemaError(ValueError):
    """A value in a TOML document has the wrong shape."""


def global_config_dir() -> str:
    """Return ``~/.config/start``."""
    home = os.path.expanduser("~")
    if not home or home == "~":
        raise ConfigLoadError("failed to get home directory")
    return os.path.join(home, ".config", "start")


def _coerce(value: Any, kind: str, where: str) -> Any:
    if kind == "str":
        ok = isinstance(value, str)
    elif kind == "int":
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif kind == "bool":
        ok = isinstance(value, bool)
    elif kind == "dict[str, str]":
        ok = isinstance(value, dict) and all(isinstance(v, str) for v in value.values())
        if ok:
            value = dict(value)
    else:
        ok = True
    if not ok:
        raise _SchemaError(f"{where}: expected {kind}, got {type(value).__name__}")
    return value


def _build(cls: Callable[..., T], table: Any, where: str) -> T:
    """Build a dataclass from a TOML table, ignoring unknown keys and ``name``."""
    if not isinstance(table, dict):
        raise _SchemaError(f"{where}: expected a table")
    known = {f.name: f.type for f in fields(cls) if f.name != "name"}
    values = {
        key: _coerce(value, known[key], f"{where}.{key}")
        for key, value in table.items()
        if key in known
    }
    return cls(**values)


def _section(document: dict, key: str) -> dict:
    table = document.get(key, {})
    if not isinstance(table, dict):
        raise _SchemaError(f"{key}: expected a table")
    return table


def _apply_settings(document: dict, config: Config) -> None:
    config.settings = _build(Settings, document.get("settings", {}), "settings")


def _apply_agents(document: dict, config: Config) -> None:
    for name, table in _section(document, "agents").items():
        agent = _build(Agent, table, f"agents.{name}")
        agent.name = name
        config.agents[name] = agent


def _apply_roles(document: dict, config: Config) -> None:
    for name, table in _section(document, "roles").items():
        role = _build(Role, table, f"roles.{name}")
        role.name = name
        config.roles[name] = role


def _apply_contexts(document: dict, config: Config) -> None:
    for name, table in _section(document, "contexts").items():
        ctx = _build(Context, table, f"contexts.{name}")
        ctx.name = name
        config.contexts[name] = ctx
        config.context_order.append(name)


def _apply_tasks(document: dict, config: Config) -> None:
    for name, table in _section(document, "tasks").items():
        task = _build(Task, table, f"tasks.{name}")
        task.name = name
        config.tasks[name] = task


_FILES = (
    ("config.toml", "settings", _apply_settings),
    ("agents.toml", "agents", _apply_agents),
    ("roles.toml", "roles", _apply_roles),
    ("contexts.toml", "contexts", _apply_contexts),
    ("tasks.toml", "tasks", _apply_tasks),
)


class Loader:
    """Reads the five config files of a directory into a :class:`Config`."""

    def __init__(self, fs: FileSystem):
        self.fs = fs

    def load_global(self) -> Config:
        """Load the configuration in ``~/.config/start``."""
        return self._load_from_dir(global_config_dir())

    def load_local(self, work_dir: str) -> Config:
        """Load the configuration in ``<work_dir>/.start``."""
        return self._load_from_dir(os.path.join(work_dir, ".start"))

    def _load_from_dir(self, directory: str) -> Config:
        config = Config()
        for filename, label, apply in _FILES:
            path = os.path.join(directory, filename)
            try:
                data = self.fs.read_file(path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise ConfigLoadError(f"failed to load {label}: {exc}") from exc
            try:
                apply(tomllib.loads(data.decode("utf-8")), config)
            except (tomllib.TOMLDecodeError, UnicodeDecodeError, _SchemaError) as exc:
                raise ConfigLoadError(
                    f"failed to load {label}: failed to parse {path}: {exc}"
                ) from exc
        return config