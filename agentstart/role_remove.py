"""Removing a role from the global or local configuration."""

from __future__ import annotations

import os

from .backup import BackupError, BackupHelper
from .loader import Loader
from .prompts import PromptHelper
from .toml_store import TomlFileError, TomlHelper


class RoleRemoveError(Exception):
    """Raised when a role cannot be removed."""


def remove_role(
    name: str,
    directory: str,
    scope: str,
    toml_helper: TomlHelper,
    backup_helper: BackupHelper,
    prompter: PromptHelper,
) -> bool:
    """Remove role ``name`` from the ``roles.toml`` in ``directory`` after confirmation.

    Returns whether the role was removed.
    """
    out = prompter.output
    try:
        roles = toml_helper.read_roles(directory)
    except TomlFileError as exc:
        raise RoleRemoveError(f"failed to read roles: {exc}") from exc

    if name not in roles:
        raise RoleRemoveError(f"role '{name}' not found in {scope} config")

    if not prompter.ask_yes_no(f"Remove role '{name}' from {scope} config?", False):
        print(f"\nRole '{name}' not removed.", file=out)
        return False

    config_path = os.path.join(directory, "roles.toml")
    try:
        backup_path = backup_helper.create_backup(config_path)
    except BackupError as exc:
        raise RoleRemoveError(f"failed to create backup: {exc}") from exc
    print(f"\n✓ Backup created: {os.path.basename(backup_path)}", file=out)

    del roles[name]
    try:
        toml_helper.write_roles(directory, roles)
    except TomlFileError as exc:
        raise RoleRemoveError(f"failed to write config: {exc}") from exc

    print(f"✓ Role '{name}' removed from {scope} config", file=out)
    print("\nUse 'start config role list' to see remaining roles.", file=out)
    return True


def _read_roles_quietly(toml_helper: TomlHelper, directory: str) -> dict:
    try:
        return toml_helper.read_roles(directory)
    except TomlFileError:
        return {}


def run_role_remove(
    loader: Loader,
    prompter: PromptHelper,
    role_name: str,
    work_dir: str | None = None,
    local_only: bool = False,
) -> None:
    """Remove ``role_name`` from whichever config holds it, asking when both do."""
    if work_dir is None:
        work_dir = os.getcwd()
    toml_helper = TomlHelper(loader.fs)
    backup_helper = BackupHelper(loader.fs)

    def remove(directory: str, scope: str) -> None:
        remove_role(role_name, directory, scope, toml_helper, backup_helper, prompter)

    local_dir = toml_helper.local_dir(work_dir)
    if local_only:
        remove(local_dir, "local")
        return

    global_dir = toml_helper.global_dir()
    has_global = role_name in _read_roles_quietly(toml_helper, global_dir)
    has_local = role_name in _read_roles_quietly(toml_helper, local_dir)

    if not has_global and not has_local:
        raise RoleRemoveError(
            f"role '{role_name}' not found in configuration.\n\n"
            "Use 'start config role list' to see available roles."
        )

    if has_global and has_local:
        choice = prompter.ask_choice(
            "Role exists in multiple scopes. Select scope to remove from:",
            ["global", "local", "both"],
        )
        if choice == "both":
            remove(global_dir, "global")
            remove(local_dir, "local")
        elif choice == "global":
            remove(global_dir, "global")
        else:
            remove(local_dir, "local")
    elif has_global:
        remove(global_dir, "global")
    else:
        remove(local_dir, "local")