"""Validation of a merged configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import Agent, Config, Context, Role, Task

_NAME_PATTERN = re.compile(r"[a-z0-9]+(-[a-z0-9]+)*")
_LOG_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
_UTD_MESSAGE = "at least one of 'file', 'command', or 'prompt' must be specified (UTD pattern)"


def is_valid_name(name: str) -> bool:
    """Tell whether ``name`` is lowercase alphanumeric words joined by single hyphens."""
    return _NAME_PATTERN.fullmatch(name) is not None


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in a configuration."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationErrors(Exception):
    """Raised when a configuration has one or more problems."""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.issues:
            return "no validation errors"
        lines = "".join(f"  - {issue}\n" for issue in self.issues)
        return f"configuration validation failed:\n{lines}"


class Validator:
    """Checks names, required fields and cross references of a configuration."""

    def validate(self, cfg: Config) -> None:
        """Raise :class:`ValidationErrors` if ``cfg`` has any problem."""
        issues: list[ValidationIssue] = []
        for name, agent in cfg.agents.items():
            issues.extend(self._validate_agent(name, agent))
        for name, role in cfg.roles.items():
            issues.extend(self._validate_role(name, role))
        for name, ctx in cfg.contexts.items():
            issues.extend(self._validate_context(name, ctx))
        for name, task in cfg.tasks.items():
            issues.extend(self._validate_task(name, task, cfg))
        issues.extend(self._validate_settings(cfg))
        if issues:
            raise ValidationErrors(issues)

    @staticmethod
    def _validate_agent(name: str, agent: Agent) -> list[ValidationIssue]:
        issues = []
        if not is_valid_name(name):
            issues.append(ValidationIssue(
                f"agents.{name}",
                "agent name must be lowercase alphanumeric with hyphens (e.g., 'my-agent')",
            ))
        if not agent.bin:
            issues.append(ValidationIssue(f"agents.{name}.bin", "bin field is required"))
        if not agent.command:
            issues.append(ValidationIssue(f"agents.{name}.command", "command field is required"))
        if "{bin}" not in agent.command:
            issues.append(ValidationIssue(
                f"agents.{name}.command", "command must contain {bin} placeholder"
            ))
        if "{model}" not in agent.command:
            issues.append(ValidationIssue(
                f"agents.{name}.command", "command must contain {model} placeholder"
            ))
        if not agent.models:
            issues.append(ValidationIssue(
                f"agents.{name}.models", "agent requires at least one model definition"
            ))
        for model_name in agent.models:
            if not is_valid_name(model_name):
                issues.append(ValidationIssue(
                    f"agents.{name}.models.{model_name}",
                    "model name must be lowercase alphanumeric with hyphens",
                ))
        if agent.default_model and agent.default_model not in agent.models:
            issues.append(ValidationIssue(
                f"agents.{name}.default_model",
                f"default_model '{agent.default_model}' not found in models table",
            ))
        return issues

    @staticmethod
    def _validate_role(name: str, role: Role) -> list[ValidationIssue]:
        issues = []
        if not is_valid_name(name):
            issues.append(ValidationIssue(
                f"roles.{name}", "role name must be lowercase alphanumeric with hyphens"
            ))
        if not (role.file or role.command or role.prompt):
            issues.append(ValidationIssue(f"roles.{name}", _UTD_MESSAGE))
        return issues

    @staticmethod
    def _validate_context(name: str, ctx: Context) -> list[ValidationIssue]:
        issues = []
        if not is_valid_name(name):
            issues.append(ValidationIssue(
                f"contexts.{name}", "context name must be lowercase alphanumeric with hyphens"
            ))
        if not (ctx.file or ctx.command or ctx.prompt):
            issues.append(ValidationIssue(f"contexts.{name}", _UTD_MESSAGE))
        return issues

    @staticmethod
    def _validate_task(name: str, task: Task, cfg: Config) -> list[ValidationIssue]:
        issues = []
        if not is_valid_name(name):
            issues.append(ValidationIssue(
                f"tasks.{name}", "task name must be lowercase alphanumeric with hyphens"
            ))
        if task.alias and not is_valid_name(task.alias):
            issues.append(ValidationIssue(
                f"tasks.{name}.alias", "alias must be lowercase alphanumeric with hyphens"
            ))
        if not (task.file or task.command or task.prompt):
            issues.append(ValidationIssue(f"tasks.{name}", _UTD_MESSAGE))
        if task.agent and task.agent not in cfg.agents:
            issues.append(ValidationIssue(
                f"tasks.{name}.agent", f"agent '{task.agent}' not found in configuration"
            ))
        if task.role and task.role not in cfg.roles:
            issues.append(ValidationIssue(
                f"tasks.{name}.role", f"role '{task.role}' not found in configuration"
            ))
        return issues

    @staticmethod
    def _validate_settings(cfg: Config) -> list[ValidationIssue]:
        issues = []
        settings = cfg.settings
        if settings.default_agent and settings.default_agent not in cfg.agents:
            issues.append(ValidationIssue(
                "settings.default_agent",
                f"default_agent '{settings.default_agent}' not found in agents",
            ))
        if settings.default_role and settings.default_role not in cfg.roles:
            issues.append(ValidationIssue(
                "settings.default_role",
                f"default_role '{settings.default_role}' not found in roles",
            ))
        if settings.log_level and settings.log_level not in _LOG_LEVELS:
            issues.append(ValidationIssue(
                "settings.log_level",
                "log_level must be one of: quiet, normal, verbose, debug",
            ))
        return issues