"""Unit tests for the search command."""

from collections.abc import Callable
from unittest.mock import MagicMock

from aurctl.cli.main import app
from aurctl.core.context import AppContext
from aurctl.models.package import RepoPackage
from factories import FakeAurClient, record
from typer.testing import CliRunner

runner = CliRunner()


class TestSearchCommand:
    """Tests for aurctl search."""

    def test_aur_results(self, use_context: Callable[..., AppContext], repo: MagicMock) -> None:
        """AUR hits are listed and other sources are skipped."""
        use_context(FakeAurClient(search_results=[record("yay", Popularity=9.0)]))

        result = runner.invoke(app, ["search", "yay", "--source", "aur"])

        assert result.exit_code == 0
        assert "yay" in result.stdout
        repo.search.assert_not_called()

    def test_repo_results(
        self,
        use_context: Callable[..., AppContext],
        vim_in_repos: RepoPackage,
    ) -> None:
        """Repository hits are listed with their source."""
        use_context(FakeAurClient())

        result = runner.invoke(app, ["search", "vim", "-s", "repo"])

        assert result.exit_code == 0
        assert "vim" in result.stdout
        assert "repo" in result.stdout

    def test_no_results(self, use_context: Callable[..., AppContext]) -> None:
        """An empty search says so."""
        use_context(FakeAurClient())

        result = runner.invoke(app, ["search", "nothing", "-s", "aur"])

        assert result.exit_code == 0
        assert "No packages found for 'nothing'." in result.stdout

    def test_limit(self, use_context: Callable[..., AppContext]) -> None:
        """--limit truncates the table and reports the total."""
        hits = [record(f"yay{i}", Popularity=float(i)) for i in range(3)]
        use_context(FakeAurClient(search_results=hits))

        result = runner.invoke(app, ["search", "yay", "-s", "aur", "--limit", "1"])

        assert result.exit_code == 0
        assert "Showing 1 of 3 results." in result.stdout
        assert "yay2" in result.stdout
        assert "yay0" not in result.stdout

    def test_invalid_source(self) -> None:
        """Unknown sources are rejected by the option parser."""
        result = runner.invoke(app, ["search", "yay", "--source", "brew"])

        assert result.exit_code != 0
