"""AUR dependency resolution.

Expands requested AUR packages into a build order containing every AUR
dependency that is neither installed nor available from the official
repositories. Dependencies always come before their dependents.
"""

import asyncio
import logging
import re
from collections.abc import Iterator
from enum import Enum

from aurctl.aur.client import AurClient
from aurctl.backends.pacman import PacmanBackend
from aurctl.core.errors import AurctlError, DependencyCycleError
from aurctl.models.aur import PackageRecord

logger = logging.getLogger(__name__)

_VERSION_QUALIFIER = re.compile(r"[<>=]")


def strip_version(dependency: str) -> str:
    """Remove a version qualifier from a dependency string.

    Examples:
        >>> strip_version("python>=3.12")
        'python'
        >>> strip_version("glibc")
        'glibc'
    """
    return _VERSION_QUALIFIER.split(dependency, maxsplit=1)[0].strip()


class _VisitState(Enum):
    VISITING = "visiting"
    RESOLVED = "resolved"


class DependencyResolver:
    """Order AUR packages so dependencies are built first.

    The traversal is depth-first over an explicit stack and deterministic
    for a given input. A name that cannot be looked up in the AUR is
    assumed to be provided some other way and is skipped.
    """

    def __init__(self, client: AurClient, repo_backend: PacmanBackend) -> None:
        self._client = client
        self._repo = repo_backend

    async def resolve(self, roots: list[PackageRecord]) -> list[PackageRecord]:
        """Compute the build order for ``roots``.

        Args:
            roots: Requested AUR packages. They are always part of the
                order, even when already installed.

        Returns:
            Records in build order, without duplicates.

        Raises:
            DependencyCycleError: If AUR packages depend on each other in a
                cycle.
        """
        known = {record.name: record for record in roots}
        state: dict[str, _VisitState] = {}
        satisfied: set[str] = set()
        order: list[PackageRecord] = []

        for root in roots:
            if root.name not in state:
                await self._visit(root, known, state, satisfied, order)

        logger.debug("Build order: %s", ", ".join(record.name for record in order))
        return order

    async def _visit(
        self,
        root: PackageRecord,
        known: dict[str, PackageRecord],
        state: dict[str, _VisitState],
        satisfied: set[str],
        order: list[PackageRecord],
    ) -> None:
        path = [root.name]
        state[root.name] = _VisitState.VISITING
        stack: list[tuple[str, PackageRecord, Iterator[str]]] = [
            (root.name, root, self._dependency_names(root))
        ]

        while stack:
            key, record, dependencies = stack[-1]
            dep = next(dependencies, None)

            if dep is None:
                stack.pop()
                path.pop()
                state[key] = _VisitState.RESOLVED
                order.append(record)
                continue

            status = state.get(dep)
            if status is _VisitState.RESOLVED or dep in satisfied:
                continue
            if status is _VisitState.VISITING:
                raise DependencyCycleError([*path[path.index(dep) :], dep])

            dep_record = known.get(dep)
            if dep_record is None:
                if await self._is_satisfied(dep):
                    satisfied.add(dep)
                    continue
                dep_record = await self._lookup(dep)
                if dep_record is None:
                    satisfied.add(dep)
                    continue

            state[dep] = _VisitState.VISITING
            path.append(dep)
            stack.append((dep, dep_record, self._dependency_names(dep_record)))

    @staticmethod
    def _dependency_names(record: PackageRecord) -> Iterator[str]:
        seen: set[str] = set()
        for dependency in record.all_depends:
            name = strip_version(dependency)
            if name and name not in seen:
                seen.add(name)
                yield name

    async def _is_satisfied(self, name: str) -> bool:
        """Check whether pacman already has or can provide ``name``."""
        if await asyncio.to_thread(self._repo.is_installed, name):
            return True
        return await asyncio.to_thread(self._repo.in_repos, name)

    async def _lookup(self, name: str) -> PackageRecord | None:
        try:
            return await self._client.info(name)
        except AurctlError as e:
            logger.debug("Skipping dependency %s, not resolvable in the AUR: %s", name, e)
            return None
