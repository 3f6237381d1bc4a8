"""Configuration data model: settings, agents, roles, contexts and tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Settings:
    """The ``[settings]`` table of ``config.toml``."""

    default_agent: str = ""
    default_role: str = ""
    log_level: str = ""
    shell: str = ""
    command_timeout: int = 0
    asset_download: bool = False
    asset_repo: str = ""
    asset_path: str = ""


@dataclass
class Agent:
    """An ``[agents.<name>]`` table of ``agents.toml``."""

    name: str = ""
    bin: str = ""
    command: str = ""
    description: str = ""
    url: str = ""
    models_url: str = ""
    default_model: str = ""
    models: dict[str, str] = field(default_factory=dict)


@dataclass
class Role:
    """A ``[roles.<name>]`` table of ``roles.toml``."""

    name: str = ""
    description: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    shell: str = ""
    command_timeout: int = 0


@dataclass
class Context:
    """A ``[contexts.<name>]`` table of ``contexts.toml``."""

    name: str = ""
    description: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    required: bool = False
    shell: str = ""
    command_timeout: int = 0


@dataclass
class Task:
    """A ``[tasks.<name>]`` table of ``tasks.toml``."""

    name: str = ""
    alias: str = ""
    description: str = ""
    role: str = ""
    agent: str = ""
    file: str = ""
    command: str = ""
    prompt: str = ""
    shell: str = ""
    command_timeout: int = 0


@dataclass
class AssetMeta:
    """Metadata describing one catalog asset."""

    type: str = ""
    category: str = ""
    name: str = ""
    description: str = ""
    tags: str = ""
    bin: str = ""
    sha: str = ""
    size: int = 0
    created: datetime | None = None
    updated: datetime | None = None


@dataclass
class CachedAsset:
    """An asset held in the local cache."""

    type: str = ""
    category: str = ""
    name: str = ""
    meta: AssetMeta = field(default_factory=AssetMeta)


@dataclass
class Config:
    """A complete configuration, global, local or merged."""

    settings: Settings = field(default_factory=Settings)
    agents: dict[str, Agent] = field(default_factory=dict)
    roles: dict[str, Role] = field(default_factory=dict)
    contexts: dict[str, Context] = field(default_factory=dict)
    context_order: list[str] = field(default_factory=list)
    tasks: dict[str, Task] = field(default_factory=dict)