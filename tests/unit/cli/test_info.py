"""Unit tests for the info command."""

from collections.abc import Callable

from aurctl.cli.main import app
from aurctl.core.context import AppContext
from factories import FakeAurClient, record
from typer.testing import CliRunner

runner = CliRunner()


class TestInfoCommand:
    """Tests for aurctl info."""

    def test_single_package(self, use_context: Callable[..., AppContext]) -> None:
        """Details of one package are shown."""
        client = FakeAurClient([record("yay", Version="12.3.5-1", Maintainer="jguer")])
        use_context(client)

        result = runner.invoke(app, ["info", "yay"])

        assert result.exit_code == 0
        assert "12.3.5-1" in result.stdout
        assert "jguer" in result.stdout
        assert client.closed

    def test_unknown_package(self, use_context: Callable[..., AppContext]) -> None:
        """A single unknown package is an error."""
        use_context(FakeAurClient())

        result = runner.invoke(app, ["info", "ghost"])

        assert result.exit_code == 1
        assert "Package not found: ghost" in result.output

    def test_several_packages_some_missing(
        self, use_context: Callable[..., AppContext]
    ) -> None:
        """Missing names in a batch are warned about, the rest shown."""
        use_context(FakeAurClient([record("yay"), record("paru")]))

        result = runner.invoke(app, ["info", "yay", "ghost", "paru"])

        assert result.exit_code == 0
        assert "Package not found: ghost" in result.output
        assert "paru" in result.stdout
