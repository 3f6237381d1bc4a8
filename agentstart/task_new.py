"""The interactive wizard that adds a new task to the configuration."""

from __future__ import annotations

import os
import re

from .backup import BackupError, BackupHelper
from .loader import ConfigLoadError, Loader
from .merge import merge
from .models import Config, Task
from .prompts import PromptHelper
from .task_config import _resolve_path
from .toml_store import TomlFileError, TomlHelper

_LEADING_INT = re.compile(r"[+-]?\d+")
_SKIP = "(skip - use default)"
_GLOBAL_CHOICE = "global (all projects)"
_LOCAL_CHOICE = "local (this project only)"
_SOURCES = ["File path", "Command", "Inline prompt", "Combination"]


class TaskCreateError(Exception):
    """Raised when a new task cannot be created."""


def _merged_config(loader: Loader, work_dir: str) -> Config:
    try:
        global_cfg = loader.load_global()
    except ConfigLoadError as exc:
        raise TaskCreateError(f"failed to load global config: {exc}") from exc
    try:
        local_cfg = loader.load_local(work_dir)
    except ConfigLoadError:
        return global_cfg
    return merge(global_cfg, local_cfg)


class _Wizard:
    def __init__(self, loader: Loader, prompter: PromptHelper, work_dir: str, local_only: bool):
        self.loader = loader
        self.prompter = prompter
        self.work_dir = work_dir
        self.local_only = local_only
        self.toml_helper = TomlHelper(loader.fs)
        self.backup_helper = BackupHelper(loader.fs)
        self.out = prompter.output

    def say(self, *lines: str) -> None:
        for line in lines:
            print(line, file=self.out)

    def choose_target(self) -> tuple[str, str]:
        local_dir = self.toml_helper.local_dir(self.work_dir)
        if self.local_only:
            if not self.loader.fs.exists(local_dir):
                raise TaskCreateError(
                    f"local config directory doesn't exist: {local_dir}\n"
                    f"Create it first: mkdir -p {local_dir}"
                )
            return local_dir, "local"

        choice = self.prompter.ask_choice("Select scope:", [_GLOBAL_CHOICE, _LOCAL_CHOICE])
        if choice == _GLOBAL_CHOICE:
            return self.toml_helper.global_dir(), "global"
        if not self.loader.fs.exists(local_dir):
            self.say(
                f"\n✗ Local config directory doesn't exist: {local_dir}",
                f"  Create it first: mkdir -p {local_dir}\n",
                "Or add to global config instead.",
            )
            raise TaskCreateError("local config directory doesn't exist")
        return local_dir, "local"

    def ask_name(self, existing: dict[str, Task], scope: str) -> str:
        while True:
            name = self.prompter.ask_validated_name("\nTask name: ")
            if name not in existing:
                return name
            self.prompter.print_error(f"Task '{name}' already exists in {scope} config.")
            self.say("", f"Use 'start config task edit {name} ' to modify existing task.", "")

    def ask_alias(self, existing: dict[str, Task]) -> str:
        self.say("")
        alias = self.prompter.ask("Alias (optional): ").strip()
        if not alias:
            return ""
        try:
            self.prompter.validate_name(alias)
        except ValueError as exc:
            self.say(f"⚠ Warning: Invalid alias format: {exc}", "  Alias not set.")
            return ""
        if any(task.alias == alias for task in existing.values()):
            self.say(f"⚠ Warning: Alias '{alias}' already in use", "  Alias not set.")
            return ""
        return alias

    def ask_selection(self, kind: str, empty_hint: str) -> str:
        """Ask whether to pick a role or agent and return the chosen name, or ''."""
        title = kind.capitalize()
        self.say("")
        if not self.prompter.ask_yes_no(f"Select {kind}?", False):
            self.prompter.print_success(f"Will use default {kind}")
            return ""

        cfg = _merged_config(self.loader, self.work_dir)
        items = cfg.roles if kind == "role" else cfg.agents
        if not items:
            self.say(f"⚠ No {kind}s configured", f"  {empty_hint}")
            self.prompter.print_success(f"Will use default {kind}")
            return ""

        names = sorted(items)
        self.say(f"\nAvailable {kind}s:")
        for number, name in enumerate(names, start=1):
            description = items[name].description
            self.say(f"  {number}) {name} - {description}" if description else f"  {number}) {name}")
        options = [*names, _SKIP]
        self.say(f"  {len(options)}) {_SKIP}", "")

        choice = self.prompter.ask_choice(f"Select {kind}:", options)
        if choice == _SKIP:
            self.prompter.print_success(f"Will use default {kind}")
            return ""
        self.prompter.print_success(f"Selected {kind}: {choice}")
        del title
        return choice

    def file_exists(self, path: str) -> bool:
        return os.path.exists(_resolve_path(path, self.work_dir))

    def ask_template(self, task: Task) -> None:
        self.say("")
        task.prompt = self.prompter.ask("Prompt template: ").strip()
        if task.prompt and "{instructions}" in task.prompt:
            self.prompter.print_success("Valid template (uses {instructions} placeholder)")

    def fill_file_source(self, task: Task) -> None:
        while True:
            path = self.prompter.ask("\nFile path: ").strip()
            if not path:
                self.prompter.print_error("File path cannot be empty.")
                continue
            task.file = path
            if self.file_exists(path):
                self.prompter.print_success("File exists")
                break
            self.say(f"⚠ Warning: File does not exist: {path}")
            if self.prompter.ask_yes_no("Continue anyway?", False):
                break
            task.file = ""
        self.ask_template(task)

    def fill_command_source(self, task: Task) -> None:
        while True:
            command = self.prompter.ask("\nCommand: ").strip()
            if command:
                break
            self.prompter.print_error("Command cannot be empty.")
        task.command = command
        self.prompter.print_success("Valid command")
        self.ask_template(task)

    def fill_inline_source(self, task: Task) -> None:
        while True:
            text = self.prompter.ask("\nPrompt text: ").strip()
            if text:
                break
            self.prompter.print_error("Prompt text cannot be empty.")
        task.prompt = text
        if "{instructions}" in text:
            self.prompter.print_success("Valid prompt (uses {instructions} placeholder)")
        else:
            self.prompter.print_success("Valid prompt")

    def fill_combination_source(self, task: Task) -> None:
        self.say("")
        path = self.prompter.ask("File path (optional, press Enter to skip): ").strip()
        if path:
            task.file = path
            if self.file_exists(path):
                self.prompter.print_success("File exists")
            else:
                self.say(f"⚠ Warning: File does not exist: {path}")
                if not self.prompter.ask_yes_no("Continue anyway?", True):
                    task.file = ""

        self.say("")
        command = self.prompter.ask("Command (optional, press Enter to skip): ").strip()
        if command:
            task.command = command
            self.prompter.print_success("Valid command")

        self.say("")
        task.prompt = self.prompter.ask("Prompt template: ").strip()
        if not (task.file or task.command or task.prompt):
            raise TaskCreateError(
                "at least one content source is required (file, command, or prompt)"
            )
        if task.prompt and "{instructions}" in task.prompt:
            self.prompter.print_success("Valid template (uses {instructions} placeholder)")

    def ask_advanced(self, task: Task) -> None:
        self.say("")
        if not self.prompter.ask_yes_no("Advanced options?", False):
            return
        self.say("")
        task.shell = self.prompter.ask("Shell override (or enter for default): ").strip()
        timeout = self.prompter.ask("Command timeout in seconds (or enter for default): ")
        if timeout:
            match = _LEADING_INT.match(timeout)
            if match is None:
                raise TaskCreateError(f"invalid timeout value: expected integer, got {timeout!r}")
            task.command_timeout = int(match.group())

    def run(self) -> Task:
        self.prompter.print_header("Add new task")
        target_dir, scope = self.choose_target()

        try:
            existing = self.toml_helper.read_tasks(target_dir)
        except TomlFileError as exc:
            raise TaskCreateError(f"failed to read existing tasks: {exc}") from exc

        task_name = self.ask_name(existing, scope)
        task = Task()
        task.alias = self.ask_alias(existing)
        task.description = self.prompter.ask("Description (optional): ").strip()
        task.role = self.ask_selection("role", "Create roles with: start config role new")
        task.agent = self.ask_selection("agent", "Configure agents with: start init")

        self.say("", "Task prompt:")
        source = self.prompter.ask_choice("Content source:", _SOURCES)
        {
            "File path": self.fill_file_source,
            "Command": self.fill_command_source,
            "Inline prompt": self.fill_inline_source,
            "Combination": self.fill_combination_source,
        }[source](task)

        self.ask_advanced(task)

        self.say("")
        tasks_path = os.path.join(target_dir, "tasks.toml")
        if self.loader.fs.exists(tasks_path):
            self.say("Backing up config to tasks.YYYY-MM-DD-HHMMSS.toml...")
            try:
                backup_path = self.backup_helper.create_backup(tasks_path)
            except BackupError as exc:
                raise TaskCreateError(f"failed to backup config: {exc}") from exc
            self.prompter.print_success(f"Backup created: {os.path.basename(backup_path)}")
            self.say("")

        existing[task_name] = task
        try:
            self.toml_helper.write_tasks(target_dir, existing)
        except TomlFileError as exc:
            raise TaskCreateError(f"failed to write tasks file: {exc}") from exc

        self.say(f"Saving task '{task_name}' to {tasks_path}...")
        self.prompter.print_success("Task added successfully")
        self.say("", "Use 'start config task list' to see all tasks.")
        self.say(f"Use 'start task {task.alias or task_name} \"instructions\"' to run.")

        task.name = task_name
        return task


def run_task_new(
    loader: Loader,
    prompter: PromptHelper | None = None,
    work_dir: str | None = None,
    local_only: bool = False,
) -> Task:
    """Ask for a new task's details, save it to ``tasks.toml`` and return it."""
    if work_dir is None:
        work_dir = os.getcwd()
    return _Wizard(loader, prompter or PromptHelper(), work_dir, local_only).run()