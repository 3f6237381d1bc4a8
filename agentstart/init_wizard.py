"""The ``init`` wizard: detect installed agents and write a starter configuration."""

from __future__ import annotations

import os
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from .models import AssetMeta
from .prompts import PromptHelper

DEFAULT_ASSET_REPO = "grantcarthew/start"

_CONFIG_FILES = (
    "config.toml",
    "agents.toml",
    "roles.toml",
    "contexts.toml",
    "tasks.toml",
)
_PRIORITY = ("claude", "gemini")
_LEADING_INT = re.compile(r"[+-]?\d+")

_ROLES_CONTENT = """# Role definitions

[roles.code-reviewer]
description = "Expert code reviewer focusing on quality and best practices"
file = "./ROLE.md"
"""

_CONTEXTS_CONTENT = """# Context documents

[contexts.environment]
description = "Environment and system information"
file = "~/reference/ENVIRONMENT.md"
required = true

[contexts.index]
description = "Documentation index"
file = "~/reference/INDEX.csv"

[contexts.agents]
description = "Agent configuration and usage"
file = "./AGENTS.md"

[contexts.project]
description = "Project overview and context"
file = "./PROJECT.md"
"""

_TASKS_CONTENT = """# Task definitions
#
# This file is created by 'start init'.
# Add custom tasks here or install them from the
# asset catalog using 'start assets add'.
#
# Example task:
#
# [tasks.code-review]
# description = "Review code for quality"
# role = "code-reviewer"
# prompt = "Review the following code..."
"""


def select_default_agent(agents: list[AssetMeta]) -> str:
    """Pick the default agent: claude, then gemini, then the first one."""
    names = [agent.name for agent in agents]
    for preferred in _PRIORITY:
        if preferred in names:
            return preferred
    return names[0] if names else ""


def detect_installed_agents(agents: Iterable[AssetMeta]) -> list[AssetMeta]:
    """Return the agents whose binary can be found on ``PATH``."""
    return [agent for agent in agents if agent.bin and shutil.which(agent.bin)]


def backup_config(target_path: str) -> list[str]:
    """Copy each existing config file to ``<name>.YYYY-MM-DD-HHMMSS.toml``.

    Returns the names of the backups written.
    """
    timestamp = datetime.now().strftime("%Y-%m-%d-%H%M%S")
    written = []
    for filename in _CONFIG_FILES:
        source = Path(target_path, filename)
        if not source.exists():
            continue
        backup_name = f"{filename.removesuffix('.toml')}.{timestamp}.toml"
        try:
            data = source.read_bytes()
        except OSError as exc:
            raise OSError(f"failed to read {filename}: {exc}") from exc
        try:
            Path(target_path, backup_name).write_bytes(data)
        except OSError as exc:
            raise OSError(f"failed to write backup {backup_name}: {exc}") from exc
        written.append(backup_name)
    return written


def write_config_files(target_path: str, agents: list[AssetMeta], default_agent: str) -> None:
    """Write the five starter config files into ``target_path``."""
    config_content = (
        "[settings]\n"
        f'default_agent = "{default_agent}"\n'
        'default_role = "code-reviewer"\n'
        'log_level = "info"\n'
        "asset_download = true\n"
        f'asset_repo = "{DEFAULT_ASSET_REPO}"\n'
    )
    agents_content = "# Agent configurations\n\n" + "".join(
        f'[agents.{agent.name}]\nbin = "{agent.bin}"\ndescription = "{agent.description}"\n\n'
        for agent in agents
    )
    contents = {
        "config.toml": config_content,
        "agents.toml": agents_content,
        "roles.toml": _ROLES_CONTENT,
        "contexts.toml": _CONTEXTS_CONTENT,
        "tasks.toml": _TASKS_CONTENT,
    }
    for filename, text in contents.items():
        Path(target_path, filename).write_text(text, encoding="utf-8")


def _read_word(prompter: PromptHelper, question: str) -> str:
    """Ask and return the first word of the answer; end of input reads as empty."""
    try:
        answer = prompter.ask(question)
    except EOFError:
        answer = ""
    words = answer.split()
    return words[0] if words else ""


def run_init(
    fetch_assets: Callable[[str], list[AssetMeta]],
    local: bool = False,
    force: bool = False,
    prompter: PromptHelper | None = None,
    home: str | None = None,
) -> str | None:
    """Run the init wizard.

    ``fetch_assets`` is called with the catalog repository and returns its assets.
    Returns the directory the configuration was written to, or ``None`` when
    nothing was written.
    """
    prompter = prompter or PromptHelper()
    out = prompter.output
    if home is None:
        home = os.path.expanduser("~")
    global_path = os.path.join(home, ".config", "start")

    def say(*lines: str) -> None:
        for line in lines:
            print(line, file=out)

    say("Initialize start configuration", "")

    if local:
        target_path, location = "./.start", "local"
        if not force:
            say(f"Creating local config at {target_path}...", "")
    elif force:
        target_path, location = global_path, "global"
    else:
        say(
            "Where should this configuration be created?",
            "  1) Global (~/.config/start/)",
            "     Personal config across all projects",
            "  2) Local (./.start/)",
            "     Project config (can be committed to git)",
            "",
        )
        answer = _read_word(prompter, "Select [1-2] (default: 1): ")
        say("")
        if answer == "2":
            target_path, location = "./.start", "local"
        else:
            target_path, location = global_path, "global"

    if os.path.exists(os.path.join(target_path, "config.toml")):
        if force:
            for name in backup_config(target_path):
                say(f"✓ {name}")
        else:
            say(f"Existing config found: {target_path}", "")
            confirm = _read_word(prompter, "Backup and reinitialize? [y/N]: ")
            say("")
            if confirm not in ("y", "Y"):
                say("Cancelled. No changes made.")
                return None
            say("Backing up config files...")
            for name in backup_config(target_path):
                say(f"✓ {name}")
            say("")

    if not force:
        say("Welcome to start!", "")

    repo = os.environ.get("ASSET_REPO") or DEFAULT_ASSET_REPO
    if not force:
        say("Fetching latest agent configurations from GitHub...")

    try:
        all_assets = fetch_assets(repo)
    except Exception:
        say(
            "",
            "Error: Failed to fetch agent configurations from GitHub.",
            "",
            "Check your network connection and try again.",
            "",
            "See the project documentation for manual setup.",
        )
        raise

    agent_assets = [asset for asset in all_assets if asset.type == "agents"]
    if not force:
        say(f"✓ Found {len(agent_assets)} agent configurations", "")
        say("Detecting installed agents...")

    selected = detect_installed_agents(agent_assets)

    if not force:
        if selected:
            for agent in selected:
                say(f"✓ {agent.name} ({agent.description})")
        else:
            say("✗ No agents detected")
        say("")

    if force and not selected:
        say(
            "No agents detected.",
            "",
            "To configure custom agents, see the configuration documentation.",
        )
        return None

    default_agent = ""
    if selected:
        if force:
            default_agent = select_default_agent(selected)
        elif len(selected) == 1:
            default_agent = selected[0].name
        else:
            say("Select default agent:")
            for number, agent in enumerate(selected, start=1):
                say(f"  {number}) {agent.name}")
            answer = _read_word(prompter, "Default [1]: ")
            say("")
            default_agent = selected[0].name
            match = _LEADING_INT.match(answer)
            if match and 1 <= int(match.group()) <= len(selected):
                default_agent = selected[int(match.group()) - 1].name

    try:
        os.makedirs(target_path, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create config directory: {exc}") from exc

    if force:
        say(f"Creating {location} config at {target_path}...")
    else:
        say(f"Creating configuration at {target_path}...")

    try:
        write_config_files(target_path, selected, default_agent)
    except OSError as exc:
        raise OSError(f"failed to write config files: {exc}") from exc

    if not force:
        say(*(f"✓ {name} created" for name in _CONFIG_FILES))
        say(
            "",
            "Default context documents configured:",
            "  ~/reference/ENVIRONMENT.md (required)",
            "  ~/reference/INDEX.csv",
            "  ./AGENTS.md",
            "  ./PROJECT.md",
            "",
        )
        if location == "local":
            say("Local config created. This can be committed to git for team consistency.")
        say("Run 'start config show' to see your configuration.", "Run 'start' to launch!")
    else:
        if selected:
            say(f"✓ Detected and configured: {', '.join(a.name for a in selected)}")
            say(f"✓ Default agent: {default_agent}")
        say("✓ Config created successfully")

    return target_path