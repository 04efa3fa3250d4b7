"""Search command implementation.

Searches the repositories, the AUR and app stores for a query.
"""

from typing import Annotated

import typer

from aurctl.cli.display import create_candidates_table
from aurctl.cli.types import SourceChoice, get_source_flags, run_with_context
from aurctl.core.context import AppContext
from aurctl.models.package import PackageCandidate
from aurctl.utils.formatting import console, print_info


def search_packages(
    query: Annotated[str, typer.Argument(help="Search term (at least 2 characters for the AUR).")],
    source: Annotated[
        SourceChoice,
        typer.Option(
            "--source",
            "-s",
            help="Package source to search: repo, aur, flatpak, snap, or all.",
            case_sensitive=False,
        ),
    ] = SourceChoice.ALL,
    by: Annotated[
        str,
        typer.Option(
            "--by",
            help="AUR field to search by (name, name-desc, maintainer, ...).",
        ),
    ] = "name-desc",
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            help="Limit number of results to display.",
        ),
    ] = None,
) -> None:
    """Search for packages.

    Examples:
        aurctl search firefox               # Search every source
        aurctl search yay --source aur      # AUR only
        aurctl search spotify -s flatpak    # Flatpak only
    """
    flags = get_source_flags(source)

    async def _search(ctx: AppContext) -> list[PackageCandidate]:
        return await ctx.aggregator.search(query, flags, by=by)

    results = run_with_context(_search)
    if not results:
        print_info(f"No packages found for '{query}'.")
        return

    shown = results[:limit] if limit is not None else results
    console.print(create_candidates_table(shown, f"Results for '{query}'"))
    if len(shown) < len(results):
        print_info(f"Showing {len(shown)} of {len(results)} results.")
