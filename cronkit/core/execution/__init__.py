"""Command execution."""

from cronkit.core.execution.command_executor import CommandExecutor

__all__ = ["CommandExecutor"]
