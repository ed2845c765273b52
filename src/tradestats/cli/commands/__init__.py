"""CLI commands."""

from tradestats.cli.commands.report import report_command

__all__ = ["report_command"]
