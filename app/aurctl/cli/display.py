"""Shared Rich display functions for candidates, reports and updates.

Provides reusable table builders and prompts used by the search,
install and upgrade commands.
"""

from datetime import UTC, datetime
from pathlib import Path

import typer
from rich.syntax import Syntax
from rich.table import Table

from aurctl.core.installer import InstallReport
from aurctl.core.upgrade import AurUpdate
from aurctl.models.aur import PackageRecord
from aurctl.models.package import PackageCandidate
from aurctl.utils.formatting import (
    console,
    create_package_table,
    format_candidate_row,
    print_error,
    print_info,
    print_success,
    print_warning,
)


def create_candidates_table(candidates: list[PackageCandidate], title: str) -> Table:
    """Create a numbered table of candidates (numbering starts at 1)."""
    table = create_package_table(title)
    for index, candidate in enumerate(candidates, start=1):
        table.add_row(*format_candidate_row(index, candidate))
    return table


def choose_candidate(name: str, candidates: list[PackageCandidate]) -> PackageCandidate | None:
    """Ask the user which source to install ``name`` from.

    Entering 0 skips the package.

    Returns:
        The selected candidate, or None if the user skipped it.
    """
    console.print(create_candidates_table(candidates, f"Sources for {name}"))
    choice: int = typer.prompt(
        f"Select a source for {name} (0 to skip)",
        default=1,
        type=typer.IntRange(0, len(candidates)),
    )
    if choice == 0:
        return None
    return candidates[choice - 1]


def review_pkgbuild(name: str, pkg_dir: Path) -> bool:
    """Offer the PKGBUILD of ``name`` for review before it is built.

    Returns:
        False if the user declines the build.
    """
    pkgbuild = pkg_dir / "PKGBUILD"
    console.print(f"\n[bold_header]:: Review {name}[/] ({pkgbuild})")
    if typer.confirm(f"View PKGBUILD for {name}?", default=False):
        try:
            content = pkgbuild.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print_warning(f"Cannot read {pkgbuild}: {e}")
        else:
            with console.pager(styles=True):
                console.print(Syntax(content, "bash", line_numbers=True))
    if typer.confirm(f"Build {name}?", default=True):
        return True
    print_warning(f"Skipping {name}")
    return False


def create_updates_table(updates: list[AurUpdate]) -> Table:
    """Create a table of available AUR updates."""
    table = Table(
        title="AUR Updates",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed", style="muted")
    table.add_column("Available", style="success")
    for update in updates:
        table.add_row(f"[package.name]{update.name}[/]", update.installed, update.available)
    return table


def _format_timestamp(value: int | None) -> str:
    if not value:
        return "-"
    return datetime.fromtimestamp(value, tz=UTC).strftime("%Y-%m-%d %H:%M UTC")


def _format_list(values: tuple[str, ...]) -> str:
    return "  ".join(values) if values else "[muted]None[/]"


def create_record_table(record: PackageRecord) -> Table:
    """Create a two-column key/value table describing an AUR package."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value", style="text")

    out_of_date = _format_timestamp(record.out_of_date) if record.is_out_of_date else "No"
    rows: list[tuple[str, str]] = [
        ("Name", f"[package.name]{record.name}[/]"),
        ("Package Base", record.package_base),
        ("Version", record.version),
        ("Description", record.description or "-"),
        ("URL", record.url or "-"),
        ("Licenses", _format_list(record.license)),
        ("Provides", _format_list(record.provides)),
        ("Depends On", _format_list(record.depends)),
        ("Make Deps", _format_list(record.make_depends)),
        ("Optional Deps", _format_list(record.opt_depends)),
        ("Conflicts With", _format_list(record.conflicts)),
        ("Maintainer", record.maintainer or "[warning]orphan[/]"),
        ("Votes", str(record.num_votes)),
        ("Popularity", f"{record.popularity:.2f}"),
        ("First Submitted", _format_timestamp(record.first_submitted)),
        ("Last Modified", _format_timestamp(record.last_modified)),
        ("Out Of Date", out_of_date),
    ]
    for field, value in rows:
        table.add_row(field, value)
    return table


def print_install_report(report: InstallReport) -> None:
    """Print what an install run did.

    Installed and skipped names are listed on stdout, failures on stderr.
    """
    if report.installed:
        print_success(f"Installed: {', '.join(report.installed)}")
    if report.skipped:
        print_info(f"Skipped: {', '.join(report.skipped)}")
    for name, reason in report.failed:
        print_error(f"{name}: {reason}")
    if not report.installed and not report.skipped and not report.failed:
        print_warning("Nothing to do.")


def print_install_plan(report: InstallReport) -> None:
    """Print the plan recorded by a dry run."""
    if report.planned:
        console.print("[bold_header]Would install (in order):[/]")
        for entry in report.planned:
            console.print(f"  {entry}")
    if report.skipped:
        print_info(f"Skipped: {', '.join(report.skipped)}")
    for name, reason in report.failed:
        print_error(f"{name}: {reason}")
