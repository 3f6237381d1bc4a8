"""Listing, showing and checking the tasks of the configuration."""

from __future__ import annotations

import os
import re
import shutil
import sys

from .loader import ConfigLoadError, Loader
from .merge import merge
from .models import Task

_RULE = "═══════════════════════════════════════════════════════════"
_THIN_RULE = "─────────────────────────────────────────────────"
_MAX_PROMPT_LINES = 20
_DEFAULT_SHELL = "sh"
_DEFAULT_TIMEOUT = 30
_VALID_PLACEHOLDERS = (
    "{file}",
    "{file_contents}",
    "{command}",
    "{command_output}",
    "{instructions}",
    "{date}",
)
_PLACEHOLDER = re.compile(r"\{[^{}\s]+\}")


class TaskConfigError(Exception):
    """Raised when a task cannot be listed, shown or passes its checks with errors."""


def task_source_type(task: Task) -> str:
    """Describe which of file, command and prompt the task uses."""
    has_file, has_command, has_prompt = bool(task.file), bool(task.command), bool(task.prompt)
    if has_file and has_command and has_prompt:
        return "Combination (file + command + template)"
    if has_file and has_command:
        return "Combination (file + command)"
    if has_file and has_prompt:
        return "File-based"
    if has_command and has_prompt:
        return "Command-based"
    if has_file:
        return "File only"
    if has_command:
        return "Command only"
    if has_prompt:
        return "Inline prompt"
    return "Invalid (no UTD fields)"


def _resolve_path(path: str, work_dir: str) -> str:
    if path == "~" or path.startswith("~/"):
        return os.path.expanduser(path)
    if os.path.isabs(path):
        return path
    return os.path.join(work_dir, path)


def _find_placeholders(text: str) -> list[str]:
    return list(dict.fromkeys(_PLACEHOLDER.findall(text)))


def _file_status(path: str, work_dir: str) -> tuple[str, bool]:
    """Print the path lines of a task file and return its status line and existence."""
    resolved = _resolve_path(path, work_dir)
    print(f"  Path: {path}")
    print(f"  Resolved: {resolved}")
    try:
        size = os.stat(resolved).st_size
    except OSError:
        return "  ✗ File not found", False
    return f"  ✓ File exists ({size / 1024:.1f} KB)", True


def _load_tasks(
    loader: Loader, work_dir: str, task_name: str | None, local_only: bool
) -> tuple[dict[str, Task], str]:
    """Return the tasks to look at and the scope they come from."""
    if local_only:
        try:
            local_cfg = loader.load_local(work_dir)
        except ConfigLoadError as exc:
            raise TaskConfigError(f"failed to load local config: {exc}") from exc
        return local_cfg.tasks, "local"

    try:
        global_cfg = loader.load_global()
    except ConfigLoadError as exc:
        raise TaskConfigError(f"failed to load global config: {exc}") from exc

    try:
        local_cfg = loader.load_local(work_dir)
    except ConfigLoadError:
        return global_cfg.tasks, "global"

    tasks = merge(global_cfg, local_cfg).tasks
    if task_name is None:
        return tasks, "merged"
    return tasks, "local" if task_name in local_cfg.tasks else "global"


def list_tasks(
    loader: Loader, work_dir: str | None = None, local_only: bool = False
) -> tuple[str, dict[str, Task]]:
    """Print all configured tasks sorted by name.

    Returns the scope and the tasks, in the order they were printed.
    """
    if work_dir is None:
        work_dir = os.getcwd()
    tasks, scope = _load_tasks(loader, work_dir, None, local_only)

    if not tasks:
        print("No tasks configured.")
        print()
        print("Create task: start config task new")
        print("Install from catalog: start assets add")
        return scope, {}

    ordered = dict(sorted(tasks.items()))
    print(f"Configured tasks ({scope}):")
    print(_RULE)
    print()
    for name, task in ordered.items():
        print(f"{name} ({task.alias})" if task.alias else name)
        if task.description:
            print(f"  {task.description}")
        print(f"  Role: {task.role}" if task.role else "  Role: (default)")
        if task.agent:
            print(f"  Agent: {task.agent}")
        print(f"  Task: {task_source_type(task)}")
        print()
    return scope, ordered


def show_task(
    loader: Loader, work_dir: str | None, task_name: str, local_only: bool = False
) -> Task:
    """Print the full configuration of one task and return it."""
    if work_dir is None:
        work_dir = os.getcwd()
    tasks, scope = _load_tasks(loader, work_dir, task_name, local_only)

    task = tasks.get(task_name)
    if task is None:
        print(f"No task '{task_name}' found in configuration.\n")
        print("Create task: start config task new")
        print("Install from catalog: start assets add")
        raise TaskConfigError("task not found")

    print(f"Task configuration: {task_name} ({scope})")
    print(_RULE)
    print()
    if task.alias:
        print(f"Alias: {task.alias}")
    if task.description:
        print(f"Description: {task.description}")
    print()

    print(f"Role: {task.role}" if task.role else "Role: (default)")
    print(f"Agent: {task.agent}" if task.agent else "Agent: (default)")
    print()

    print(f"Task prompt type: {task_source_type(task)}")
    print()

    if task.file:
        print("File:")
        status, _ = _file_status(task.file, work_dir)
        print(status)
        print()

    if task.command:
        print("Command:")
        print(f"  Shell: {task.shell}" if task.shell else "  Shell: (default)")
        if task.command_timeout > 0:
            print(f"  Timeout: {task.command_timeout} seconds")
        else:
            print("  Timeout: (default)")
        print(f"  Command: {task.command}")
        print()

    if task.prompt:
        print("Prompt template:")
        lines = task.prompt.split("\n")
        for line in lines[:_MAX_PROMPT_LINES]:
            print(f"  {line}")
        if len(lines) > _MAX_PROMPT_LINES:
            print(f"  ... ({len(lines) - _MAX_PROMPT_LINES} more lines)")
        print()

    return task


def test_task(loader: Loader, work_dir: str | None, task_name: str) -> bool:
    """Check a task's file, shell and prompt template.

    Returns ``True`` when there are no warnings, ``False`` when there are;
    raises :class:`TaskConfigError` when the task is missing or has errors.
    """
    if work_dir is None:
        work_dir = os.getcwd()
    tasks, scope = _load_tasks(loader, work_dir, task_name, False)

    task = tasks.get(task_name)
    if task is None:
        print(f"Error: Task '{task_name}' not found in configuration.\n", file=sys.stderr)
        print("Use 'start config task list' to see available tasks.", file=sys.stderr)
        raise TaskConfigError("task not found")

    print(f"Testing task: {task_name}")
    print(_THIN_RULE)
    print()

    print("Configuration:")
    print(f"  Scope: {scope}")
    if task.alias:
        print(f"  Alias: {task.alias}")
    if task.description:
        print(f"  Description: {task.description}")
    print(f"  Role: {task.role}" if task.role else "  Role: (default)")
    print(f"  Agent: {task.agent}" if task.agent else "  Agent: (default)")
    print(f"  Type: {task_source_type(task)}")
    print()

    has_errors = False
    has_warnings = False

    if task.file:
        print("File:")
        status, exists = _file_status(task.file, work_dir)
        print(status)
        if not exists:
            has_warnings = True
        print()

    if task.command:
        print("Command:")
        shell = task.shell or _DEFAULT_SHELL
        print(f"  Shell: {shell}")
        timeout = task.command_timeout or _DEFAULT_TIMEOUT
        print(f"  Timeout: {timeout} seconds")
        print(f"  Command: {task.command}")
        shell_bin = shutil.which(shell)
        if shell_bin is None:
            print(f"  ✗ Shell not found: {shell}")
            has_errors = True
        else:
            print(f"  ✓ Shell available: {shell_bin}")
        print()

    if task.prompt:
        print("Prompt template:")
        placeholders = _find_placeholders(task.prompt)
        if placeholders:
            print(f"  ✓ Uses placeholders: {', '.join(placeholders)}")
            for placeholder in placeholders:
                if placeholder not in _VALID_PLACEHOLDERS:
                    print(f"  ⚠ Unknown placeholder {placeholder}")
                    print("    Valid: " + ", ".join(_VALID_PLACEHOLDERS))
                    has_warnings = True

            if "{instructions}" not in task.prompt:
                print("  ℹ Template doesn't use {instructions} placeholder")
                print("    Tasks typically use {instructions} for dynamic user input")

            uses_file = "{file}" in task.prompt or "{file_contents}" in task.prompt
            if uses_file and not task.file:
                print("  ⚠ Prompt uses {file} or {file_contents} but no file configured")
                has_warnings = True
            uses_command = "{command}" in task.prompt or "{command_output}" in task.prompt
            if uses_command and not task.command:
                print("  ⚠ Prompt uses {command} or {command_output} but no command configured")
                has_warnings = True
        else:
            print(f"  ✓ Valid inline prompt ({len(task.prompt.encode('utf-8'))} characters)")
        print()

    if not (task.file or task.command or task.prompt):
        print("✗ No task prompt defined")
        print("  At least one field required: file, command, or prompt")
        has_errors = True
        print()

    if has_errors:
        print(f"✗ Task '{task_name}' has errors")
        print(f"  Fix configuration: start config task edit {task_name}")
        raise TaskConfigError("configuration errors")
    if has_warnings:
        print(f"⚠ Task '{task_name}' has warnings (see above)")
        return False
    print(f"✓ Task '{task_name}' is configured correctly")
    return True