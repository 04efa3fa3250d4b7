"""Fixtures for CLI command tests.

Commands run against an AppContext wired to in-memory doubles; the real
context factory is patched out.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from aurctl.backends.pacman import PacmanBackend
from aurctl.core.cache import SearchCache
from aurctl.core.config import AurctlConfig
from aurctl.core.context import AppContext
from aurctl.models.action import Action, ActionResult, ActionType
from aurctl.models.package import PackageSource, RepoPackage
from factories import FakeAurClient, FakeRunner


@pytest.fixture
def repo() -> MagicMock:
    """Pacman double with nothing installed and empty repositories."""
    repo = MagicMock(spec=PacmanBackend)
    repo.search.return_value = []
    repo.get_package_details.return_value = None
    repo.is_installed.return_value = False
    repo.in_repos.return_value = False
    repo.list_foreign.return_value = []
    repo.install.side_effect = lambda names, extra_args=None: [
        ActionResult(
            action=Action(action_type=ActionType.INSTALL, package=name, source=PackageSource.REPO),
            success=True,
        )
        for name in names
    ]
    return repo


@pytest.fixture
def runner_double() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def use_context(
    tmp_path: Path, repo: MagicMock, runner_double: FakeRunner
) -> Iterator[Callable[..., AppContext]]:
    """Install a context built from ``client`` for the next CLI invocation."""
    with patch("aurctl.cli.types.create_context") as mock_create:

        def _use(client: FakeAurClient, **config: Any) -> AppContext:
            context = AppContext(
                config=AurctlConfig(clone_dir=tmp_path / "clone", use_git_clone=False, **config),
                client=client,  # type: ignore[arg-type]
                repo=repo,
                cache=SearchCache(tmp_path / "search_cache.json"),
                runner=runner_double,
            )
            mock_create.return_value = context
            return context

        yield _use


@pytest.fixture
def vim_in_repos(repo: MagicMock) -> RepoPackage:
    """Make the repositories provide vim."""
    vim = RepoPackage(repository="extra", name="vim", version="9.1.0-1", description="Vi Improved")
    repo.get_package_details.side_effect = lambda name: vim if name == "vim" else None
    repo.search.return_value = [vim]
    return vim
