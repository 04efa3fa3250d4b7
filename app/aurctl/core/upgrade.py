"""AUR update detection."""

import asyncio
import logging
from dataclasses import dataclass

from aurctl.aur.client import AurClient
from aurctl.backends.pacman import PacmanBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AurUpdate:
    """An installed foreign package with a newer AUR version."""

    name: str
    installed: str
    available: str


async def find_aur_updates(client: AurClient, repo_backend: PacmanBackend) -> list[AurUpdate]:
    """Compare installed foreign packages against the AUR.

    Foreign packages the AUR does not know (local builds, dropped
    packages) are ignored.

    Returns:
        Updates in ``pacman -Qm`` order.

    Raises:
        RemoteError: If the batch query fails.
    """
    foreign = await asyncio.to_thread(repo_backend.list_foreign)
    if not foreign:
        return []

    records = await client.info_batch([name for name, _ in foreign])
    available = {record.name: record.version for record in records}

    updates: list[AurUpdate] = []
    for name, installed in foreign:
        version = available.get(name)
        if version is None:
            logger.debug("%s is not in the AUR", name)
            continue
        if repo_backend.vercmp(installed, version) < 0:
            updates.append(AurUpdate(name=name, installed=installed, available=version))
    return updates
