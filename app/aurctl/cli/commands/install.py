"""Install command implementation.

Installs packages from whichever source provides them, building AUR
packages and their AUR dependencies with makepkg.
"""

from typing import Annotated

import typer

from aurctl.cli.display import (
    choose_candidate,
    print_install_plan,
    print_install_report,
    review_pkgbuild,
)
from aurctl.cli.types import run_with_context
from aurctl.core.context import AppContext
from aurctl.core.installer import Installer, InstallReport


def install_packages(
    packages: Annotated[
        list[str],
        typer.Argument(help="Packages to install, optionally prefixed (aur/yay, extra/vim)."),
    ],
    noconfirm: Annotated[
        bool,
        typer.Option(
            "--noconfirm",
            "-y",
            help="Do not ask pacman for confirmation.",
        ),
    ] = False,
    remove_make_deps: Annotated[
        bool | None,
        typer.Option(
            "--remove-make-deps/--keep-make-deps",
            help="Remove build-only dependencies after building (default from config).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be installed without changing anything.",
        ),
    ] = False,
) -> None:
    """Install packages.

    When a package is available from several sources you are asked to pick
    one; a source prefix skips the question.

    Examples:
        aurctl install yay                  # Pick a source interactively
        aurctl install aur/paru             # AUR only
        aurctl install flatpak/spotify      # Flatpak only
        aurctl install -y extra/vim         # No pacman confirmation
    """

    async def _install(ctx: AppContext) -> InstallReport:
        if remove_make_deps is not None:
            ctx.config = ctx.config.model_copy(update={"remove_make_deps": remove_make_deps})
        installer = Installer(ctx, choose_candidate, review_pkgbuild)
        return await installer.install(
            packages, noconfirm=noconfirm or not ctx.config.confirm, dry_run=dry_run
        )

    report = run_with_context(_install)
    if dry_run:
        print_install_plan(report)
    else:
        print_install_report(report)
    if not report.ok:
        raise typer.Exit(code=1)
