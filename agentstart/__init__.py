"""Layered TOML configuration for agents, roles, contexts and tasks, with interactive workflows."""

__version__ = "0.1.0"