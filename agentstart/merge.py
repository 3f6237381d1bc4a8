"""Merging of global and local configuration."""

from __future__ import annotations

from .models import Config, Context, Settings


def merge(global_config: Config, local_config: Config) -> Config:
    """Return a new config with ``local_config`` layered over ``global_config``."""
    contexts, order = _merge_contexts(
        global_config.contexts,
        global_config.context_order,
        local_config.contexts,
        local_config.context_order,
    )
    return Config(
        settings=_merge_settings(global_config.settings, local_config.settings),
        agents={**global_config.agents, **local_config.agents},
        roles={**global_config.roles, **local_config.roles},
        contexts=contexts,
        context_order=order,
        tasks={**global_config.tasks, **local_config.tasks},
    )


def _merge_settings(global_settings: Settings, local_settings: Settings) -> Settings:
    def pick(local_value, global_value):
        return local_value if local_value else global_value

    return Settings(
        default_agent=pick(local_settings.default_agent, global_settings.default_agent),
        default_role=pick(local_settings.default_role, global_settings.default_role),
        log_level=pick(local_settings.log_level, global_settings.log_level),
        shell=pick(local_settings.shell, global_settings.shell),
        command_timeout=pick(local_settings.command_timeout, global_settings.command_timeout),
        # A boolean cannot tell "unset" from "false", so the local value always wins.
        asset_download=local_settings.asset_download,
        asset_repo=pick(local_settings.asset_repo, global_settings.asset_repo),
        asset_path=pick(local_settings.asset_path, global_settings.asset_path),
    )


def _merge_contexts(
    global_contexts: dict[str, Context],
    global_order: list[str],
    local_contexts: dict[str, Context],
    local_order: list[str],
) -> tuple[dict[str, Context], list[str]]:
    """Global contexts come first in their order, then local-only ones in theirs."""
    result: dict[str, Context] = {}
    order: list[str] = []

    for name in global_order:
        if name in global_contexts:
            result[name] = local_contexts.get(name, global_contexts[name])
            order.append(name)

    for name in local_order:
        if name not in result and name in local_contexts:
            result[name] = local_contexts[name]
            order.append(name)

    return result, order