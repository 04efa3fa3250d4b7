"""CLI commands for aurctl.

This package contains all subcommand implementations.
"""

from aurctl.cli.commands import cache, info, install, search, upgrade

__all__ = ["cache", "info", "install", "search", "upgrade"]
