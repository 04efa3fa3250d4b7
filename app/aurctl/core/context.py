"""Application context.

Holds the collaborators one aurctl invocation works with. The CLI builds
it once from the loaded configuration and passes it down explicitly.
"""

from dataclasses import dataclass, field
from typing import Self

from aurctl.aur.client import AurClient
from aurctl.aur.download import PackageFetcher
from aurctl.backends.base import AppStoreBackend
from aurctl.backends.flatpak import FlatpakBackend
from aurctl.backends.pacman import PacmanBackend
from aurctl.backends.snap import SnapBackend
from aurctl.core.build import BuildOrchestrator
from aurctl.core.cache import SearchCache
from aurctl.core.config import AurctlConfig
from aurctl.core.paths import get_search_cache_path
from aurctl.core.resolver import DependencyResolver
from aurctl.core.sources import SourceAggregator
from aurctl.models.package import PackageSource
from aurctl.utils.shell import ShellRunner, ToolRunner


@dataclass
class AppContext:
    """Everything an install, search or upgrade run needs.

    Attributes:
        config: Loaded user configuration.
        client: AUR RPC client shared by every component.
        repo: Pacman backend.
        app_stores: Flatpak and Snap backends, whether installed or not.
        cache: Search result cache.
    """

    config: AurctlConfig
    client: AurClient
    repo: PacmanBackend
    cache: SearchCache
    runner: ToolRunner
    app_stores: list[AppStoreBackend] = field(default_factory=list)

    @classmethod
    def create(cls, config: AurctlConfig) -> Self:
        """Build a context with the real backends for ``config``."""
        return cls(
            config=config,
            client=AurClient.from_config(config),
            repo=PacmanBackend(),
            cache=SearchCache(get_search_cache_path(), ttl=config.cache_ttl_seconds),
            runner=ShellRunner(),
            app_stores=[FlatpakBackend(), SnapBackend()],
        )

    @property
    def aggregator(self) -> SourceAggregator:
        return SourceAggregator(self.client, self.repo, self.app_stores, self.cache)

    @property
    def resolver(self) -> DependencyResolver:
        return DependencyResolver(self.client, self.repo)

    @property
    def fetcher(self) -> PackageFetcher:
        return PackageFetcher(
            self.client,
            self.config.clone_dir,
            use_git_clone=self.config.use_git_clone,
            runner=self.runner,
        )

    @property
    def builder(self) -> BuildOrchestrator:
        return BuildOrchestrator(self.runner, self.repo)

    def app_store(self, source: PackageSource) -> AppStoreBackend | None:
        """Return the app-store backend handling ``source``, if configured."""
        for backend in self.app_stores:
            if backend.source == source:
                return backend
        return None

    async def aclose(self) -> None:
        """Release network resources."""
        await self.client.aclose()
