"""Upgrade command implementation.

Checks installed AUR packages for newer versions and rebuilds them.
"""

from typing import Annotated

import typer

from aurctl.cli.display import (
    choose_candidate,
    create_updates_table,
    print_install_report,
    review_pkgbuild,
)
from aurctl.cli.types import run_with_context
from aurctl.core.context import AppContext
from aurctl.core.installer import Installer, InstallReport
from aurctl.core.upgrade import AurUpdate, find_aur_updates
from aurctl.utils.formatting import console, print_info, print_success


def upgrade_packages(
    check: Annotated[
        bool,
        typer.Option(
            "--check",
            "-c",
            help="Only list available updates.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompts.",
        ),
    ] = False,
) -> None:
    """Upgrade installed AUR packages.

    Examples:
        aurctl upgrade --check              # List available updates
        aurctl upgrade                      # Rebuild outdated AUR packages
        aurctl upgrade -y                   # Without confirmation
    """

    async def _find(ctx: AppContext) -> list[AurUpdate]:
        return await find_aur_updates(ctx.client, ctx.repo)

    updates = run_with_context(_find)
    if not updates:
        print_success("All AUR packages are up to date.")
        return

    console.print(create_updates_table(updates))
    if check:
        return

    if not yes and not typer.confirm(f"Upgrade {len(updates)} package(s)?", default=True):
        print_info("Aborted.")
        return

    specs = [f"aur/{update.name}" for update in updates]

    async def _upgrade(ctx: AppContext) -> InstallReport:
        installer = Installer(ctx, choose_candidate, review_pkgbuild)
        return await installer.install(
            specs, noconfirm=yes or not ctx.config.confirm, reinstall=True
        )

    report = run_with_context(_upgrade)
    print_install_report(report)
    if not report.ok:
        raise typer.Exit(code=1)
