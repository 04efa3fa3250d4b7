"""Cache management commands.

Inspect and clear the search cache and the package clone directory.
"""

from typing import Annotated

import typer

from aurctl.aur.download import has_built_packages, remove_package_dir
from aurctl.cli.types import load_cli_config
from aurctl.core.cache import SearchCache
from aurctl.core.errors import DownloadFailedError
from aurctl.core.paths import get_search_cache_path
from aurctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage the search cache and downloaded package trees.",
    no_args_is_help=True,
)


@app.command()
def info() -> None:
    """Show cache locations and sizes."""
    config = load_cli_config()
    cache = SearchCache(get_search_cache_path(), ttl=config.cache_ttl_seconds)
    clone_dir = config.clone_dir
    trees = [p for p in clone_dir.iterdir() if p.is_dir()] if clone_dir.is_dir() else []

    console.print(f"[bold_header]Search cache:[/] {cache.path} ({len(cache)} entries)")
    console.print(f"[bold_header]Clone dir:[/]    {clone_dir} ({len(trees)} package trees)")


@app.command()
def clear(
    clones: Annotated[
        bool,
        typer.Option(
            "--clones",
            help="Also remove downloaded package trees without built packages.",
        ),
    ] = False,
) -> None:
    """Clear the search cache.

    Examples:
        aurctl cache clear                  # Search cache only
        aurctl cache clear --clones         # Also unbuilt package trees
    """
    config = load_cli_config()
    SearchCache(get_search_cache_path(), ttl=config.cache_ttl_seconds).clear()
    print_success("Search cache cleared.")

    clone_dir = config.clone_dir
    if not clones or not clone_dir.is_dir():
        return

    removed = 0
    failed = False
    for pkg_dir in sorted(clone_dir.iterdir()):
        if not pkg_dir.is_dir():
            continue
        if has_built_packages(pkg_dir):
            print_info(f"Keeping {pkg_dir.name} (contains built packages)")
            continue
        try:
            remove_package_dir(pkg_dir)
        except DownloadFailedError as e:
            print_error(str(e))
            failed = True
            continue
        removed += 1

    print_success(f"Removed {removed} package tree(s).")
    if failed:
        raise typer.Exit(code=1)
