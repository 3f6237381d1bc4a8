"""Removing a task from the global or local configuration."""

from __future__ import annotations

import os

from .backup import BackupError, BackupHelper
from .loader import Loader
from .models import Task
from .prompts import PromptHelper
from .toml_store import TomlFileError, TomlHelper


class TaskRemoveError(Exception):
    """Raised when a task cannot be removed."""


def remove_task_from_scope(
    task_name: str,
    target_dir: str,
    scope: str,
    tasks: dict[str, Task],
    prompter: PromptHelper,
    toml_helper: TomlHelper,
    backup_helper: BackupHelper,
) -> bool:
    """Remove ``task_name`` from ``tasks`` and rewrite ``tasks.toml`` after confirmation.

    Returns whether the task was removed.
    """
    out = prompter.output
    task = tasks.get(task_name)
    if task is None:
        raise TaskRemoveError(f"task '{task_name}' not found in {scope} config")

    if task.alias:
        print(f"Task: {task_name} (alias: {task.alias})", file=out)
    else:
        print(f"Task: {task_name}", file=out)
    if task.description:
        print(f"Description: {task.description}", file=out)
    print(file=out)

    if not prompter.ask_yes_no(f"Remove task '{task_name}' from {scope} config?", False):
        print(file=out)
        print(f"Task '{task_name}' not removed.", file=out)
        return False

    print(file=out)
    tasks_path = os.path.join(target_dir, "tasks.toml")
    print("Backing up config to tasks.YYYY-MM-DD-HHMMSS.toml...", file=out)
    try:
        backup_path = backup_helper.create_backup(tasks_path)
    except BackupError as exc:
        raise TaskRemoveError(f"failed to backup config: {exc}") from exc
    prompter.print_success(f"Backup created: {os.path.basename(backup_path)}")
    print(file=out)

    del tasks[task_name]
    try:
        toml_helper.write_tasks(target_dir, tasks)
    except TomlFileError as exc:
        raise TaskRemoveError(f"failed to write tasks file: {exc}") from exc

    print(f"Removing task '{task_name}' from {tasks_path}...", file=out)
    prompter.print_success(f"Task '{task_name}' removed successfully")
    print(file=out)
    print("Use 'start config task list' to see remaining tasks.", file=out)
    return True


def run_task_remove(
    loader: Loader,
    prompter: PromptHelper,
    task_name: str,
    work_dir: str | None = None,
    local_only: bool = False,
) -> list[str]:
    """Remove ``task_name`` from whichever config holds it, asking when both do.

    Returns the scopes the task was removed from.
    """
    if work_dir is None:
        work_dir = os.getcwd()
    out = prompter.output
    toml_helper = TomlHelper(loader.fs)
    backup_helper = BackupHelper(loader.fs)

    global_dir = toml_helper.global_dir()
    local_dir = toml_helper.local_dir(work_dir)

    def read(directory: str, scope: str) -> dict[str, Task]:
        try:
            return toml_helper.read_tasks(directory)
        except TomlFileError as exc:
            raise TaskRemoveError(f"failed to read {scope} tasks: {exc}") from exc

    def remove(directory: str, scope: str, tasks: dict[str, Task]) -> list[str]:
        removed = remove_task_from_scope(
            task_name, directory, scope, tasks, prompter, toml_helper, backup_helper
        )
        return [scope] if removed else []

    if local_only:
        return remove(local_dir, "local", read(local_dir, "local"))

    global_tasks = read(global_dir, "global")
    local_tasks = read(local_dir, "local")
    in_global = task_name in global_tasks
    in_local = task_name in local_tasks

    if not in_global and not in_local:
        print(f"Error: Task '{task_name}' not found in configuration.\n", file=out)
        print("Use 'start config task list' to see available tasks.", file=out)
        raise TaskRemoveError("task not found")

    if in_global and in_local:
        print("Task exists in both global and local configs.", file=out)
        print(file=out)
        choice = prompter.ask_choice(
            "Select scope to remove from:", ["global", "local", "both"]
        )
        if choice == "both":
            return remove(global_dir, "global", global_tasks) + remove(
                local_dir, "local", local_tasks
            )
        if choice == "global":
            return remove(global_dir, "global", global_tasks)
        return remove(local_dir, "local", local_tasks)

    if in_local:
        return remove(local_dir, "local", local_tasks)
    return remove(global_dir, "global", global_tasks)