"""Multi-source package discovery.

Finds every backend that can provide a requested package name, in the
fixed order: repositories, AUR, Flatpak, Snap.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Self

from aurctl.aur.client import AurClient
from aurctl.backends.base import AppStoreBackend, SearchResult
from aurctl.backends.pacman import PacmanBackend
from aurctl.core.cache import SearchCache
from aurctl.core.errors import AurctlError, PackageNotFoundError, RemoteError
from aurctl.models.package import PackageCandidate, PackageSource

logger = logging.getLogger(__name__)

# Prefixes that select the pacman repositories
REPO_PREFIXES: frozenset[str] = frozenset({"core", "extra", "multilib", "community", "repo"})

# Failures of a local package tool; ValueError covers undecodable output
_BACKEND_ERRORS = (OSError, RuntimeError, ValueError, subprocess.TimeoutExpired)


@dataclass(frozen=True, slots=True)
class SourceFlags:
    """Which sources a lookup may consult."""

    repo: bool = True
    aur: bool = True
    flatpak: bool = True
    snap: bool = True

    @classmethod
    def all(cls) -> Self:
        return cls()

    @classmethod
    def only(cls, source: PackageSource) -> Self:
        """Enable exactly one source."""
        return cls(
            repo=source == PackageSource.REPO,
            aur=source == PackageSource.AUR,
            flatpak=source == PackageSource.FLATPAK,
            snap=source == PackageSource.SNAP,
        )

    @property
    def cache_tag(self) -> str:
        """Short string identifying the enabled sources, e.g. 'ra--'."""
        return "".join(
            letter if enabled else "-"
            for letter, enabled in zip(
                "rafs", (self.repo, self.aur, self.flatpak, self.snap), strict=True
            )
        )


def parse_package_spec(spec: str) -> tuple[str, SourceFlags | None]:
    """Split an optional source prefix off a package spec.

    Examples:
        >>> parse_package_spec("aur/yay")
        ('yay', SourceFlags(repo=False, aur=True, flatpak=False, snap=False))
        >>> parse_package_spec("firefox")
        ('firefox', None)

    Returns:
        The bare name and the flags the prefix selects, or None when the
        spec has no prefix.
    """
    prefix, sep, name = spec.partition("/")
    if not sep:
        return spec, None

    prefix = prefix.lower()
    if prefix == "aur":
        return name, SourceFlags.only(PackageSource.AUR)
    if prefix == "flatpak":
        return name, SourceFlags.only(PackageSource.FLATPAK)
    if prefix == "snap":
        return name, SourceFlags.only(PackageSource.SNAP)
    if prefix not in REPO_PREFIXES:
        logger.debug("Unknown source prefix %r, treating it as a repository", prefix)
    return name, SourceFlags.only(PackageSource.REPO)


class SourceAggregator:
    """Collect install candidates for a name from every enabled backend.

    A backend that fails is logged and skipped; it never aborts the lookup.
    """

    def __init__(
        self,
        client: AurClient,
        repo_backend: PacmanBackend,
        app_stores: list[AppStoreBackend] | None = None,
        cache: SearchCache | None = None,
    ) -> None:
        self._client = client
        self._repo = repo_backend
        self._app_stores = app_stores or []
        self._cache = cache

    async def find_sources(
        self, name: str, flags: SourceFlags | None = None
    ) -> list[PackageCandidate]:
        """Find every source that provides ``name``.

        Args:
            name: Package name to look up.
            flags: Sources to consult. Defaults to all.

        Returns:
            Candidates ordered repo, aur, flatpak, snap. Flatpak and Snap may
            contribute several hits each.
        """
        flags = flags or SourceFlags.all()
        candidates: list[PackageCandidate] = []

        if flags.repo:
            candidates.extend(self._find_in_repos(name))
        if flags.aur:
            candidates.extend(await self._find_in_aur(name))

        for backend in self._app_stores:
            if self._enabled(backend, flags):
                hits = self._search_app_store(backend, name)
                candidates.extend(
                    PackageCandidate(name=name, package=pkg)
                    for pkg in hits
                    if backend.matches(name, pkg)
                )

        return candidates

    async def find_sources_cached(
        self, name: str, flags: SourceFlags | None = None
    ) -> list[PackageCandidate]:
        """Like find_sources(), consulting the search cache first.

        A failure to write the cache is logged, never raised.
        """
        flags = flags or SourceFlags.all()
        if self._cache is None:
            return await self.find_sources(name, flags)

        key = f"{flags.cache_tag}:{name}"
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Search cache hit for %s", key)
            return cached

        candidates = await self.find_sources(name, flags)
        try:
            self._cache.set(key, candidates)
        except OSError as e:
            logger.warning("Failed to write search cache: %s", e)
        return candidates

    async def search(
        self, query: str, flags: SourceFlags | None = None, *, by: str = "name-desc"
    ) -> list[PackageCandidate]:
        """Search every enabled source for packages related to ``query``.

        Unlike find_sources(), hits need not match the name exactly. Each
        hit is paired with its own name.

        Raises:
            InvalidInputError: If AUR search is enabled and the query is
                shorter than two characters.
        """
        flags = flags or SourceFlags.all()
        results: list[PackageCandidate] = []

        if flags.repo:
            try:
                repo_hits = self._repo.search(query)
            except _BACKEND_ERRORS as e:
                logger.debug("Repository search for %s failed: %s", query, e)
                repo_hits = []
            results.extend(PackageCandidate(name=pkg.name, package=pkg) for pkg in repo_hits)

        if flags.aur:
            try:
                records = await self._client.search(query, by=by)
            except RemoteError as e:
                logger.warning("AUR search for %s failed: %s", query, e)
                records = []
            records = sorted(records, key=lambda r: r.popularity, reverse=True)
            results.extend(PackageCandidate(name=r.name, package=r) for r in records)

        for backend in self._app_stores:
            if self._enabled(backend, flags):
                hits = self._search_app_store(backend, query)
                results.extend(PackageCandidate(name=pkg.name, package=pkg) for pkg in hits)

        return results

    def _find_in_repos(self, name: str) -> list[PackageCandidate]:
        try:
            for pkg in self._repo.search(name):
                if pkg.name == name:
                    return [PackageCandidate(name=name, package=pkg)]
        except _BACKEND_ERRORS as e:
            logger.debug("Repository search for %s failed: %s", name, e)

        try:
            details = self._repo.get_package_details(name)
        except _BACKEND_ERRORS as e:
            logger.debug("Repository lookup for %s failed: %s", name, e)
            return []
        return [PackageCandidate(name=name, package=details)] if details else []

    async def _find_in_aur(self, name: str) -> list[PackageCandidate]:
        try:
            record = await self._client.info(name)
        except PackageNotFoundError:
            return []
        except AurctlError as e:
            logger.debug("AUR lookup for %s failed: %s", name, e)
            return []
        return [PackageCandidate(name=name, package=record)]

    @staticmethod
    def _enabled(backend: AppStoreBackend, flags: SourceFlags) -> bool:
        if backend.source == PackageSource.FLATPAK:
            return flags.flatpak
        if backend.source == PackageSource.SNAP:
            return flags.snap
        return False

    def _search_app_store(self, backend: AppStoreBackend, query: str) -> list[SearchResult]:
        try:
            if not backend.is_available():
                return []
            return list(backend.search(query))
        except _BACKEND_ERRORS as e:
            logger.debug("%s search for %s failed: %s", backend.source.label, query, e)
            return []
