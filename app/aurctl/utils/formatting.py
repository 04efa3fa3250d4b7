"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from aurctl.core.theme import get_theme

if TYPE_CHECKING:
    from aurctl.models.package import PackageCandidate


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Packages") -> Table:
    """Create a pre-configured table for package candidates.

    Args:
        title: Table title.

    Returns:
        Rich Table with index, source, package, version and description columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Source", no_wrap=True)
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="package.version")
    table.add_column("Description", style="text", overflow="ellipsis")
    return table


def format_source(source_value: str) -> str:
    """Wrap a source name in its theme style."""
    return f"[source.{source_value}]{source_value}[/]"


def format_candidate_row(index: int, candidate: PackageCandidate) -> tuple[str, str, str, str, str]:
    """Format a candidate as a table row.

    Returns:
        Tuple of (index, source, name, version, description) with Rich markup.
    """
    pkg = candidate.package
    name = f"[package.name]{pkg.name}[/]"
    if getattr(pkg, "installed", False):
        name += " [success]\\[installed][/]"
    version = pkg.version or "-"
    if getattr(pkg, "is_out_of_date", False):
        version = f"[warning]{version} (out of date)[/]"
    return (
        str(index),
        format_source(candidate.source.value),
        name,
        version,
        candidate.description or "-",
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
