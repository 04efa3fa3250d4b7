"""Utility modules for aurctl.

This module exports commonly used utility functions.
"""

from aurctl.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from aurctl.utils.shell import CommandResult, ShellRunner, ToolRunner, command_exists, run_command

__all__ = [
    "CommandResult",
    "ShellRunner",
    "ToolRunner",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
