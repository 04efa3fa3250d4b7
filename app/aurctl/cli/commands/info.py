"""Info command implementation.

Shows AUR metadata for one or more packages.
"""

from typing import Annotated

import typer

from aurctl.cli.display import create_record_table
from aurctl.cli.types import run_with_context
from aurctl.core.context import AppContext
from aurctl.models.aur import PackageRecord
from aurctl.utils.formatting import console, print_warning


def show_info(
    names: Annotated[list[str], typer.Argument(help="AUR package names.")],
) -> None:
    """Show AUR package details.

    Examples:
        aurctl info yay
        aurctl info yay paru
    """

    async def _info(ctx: AppContext) -> list[PackageRecord]:
        if len(names) == 1:
            return [await ctx.client.info(names[0])]
        return await ctx.client.info_batch(names)

    records = run_with_context(_info)

    found = {record.name for record in records}
    for name in names:
        if name not in found:
            print_warning(f"Package not found: {name}")

    for index, record in enumerate(records):
        if index:
            console.print()
        console.print(create_record_table(record))

    if not records:
        raise typer.Exit(code=1)
