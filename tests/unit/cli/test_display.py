"""Unit tests for the interactive display helpers."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from aurctl.cli.display import review_pkgbuild
from rich.syntax import Syntax


def make_tree(tmp_path: Path) -> Path:
    pkg_dir = tmp_path / "foo"
    pkg_dir.mkdir()
    (pkg_dir / "PKGBUILD").write_text("pkgname=foo\nbuild() { make; }\n")
    return pkg_dir


class TestReviewPkgbuild:
    """Tests for review_pkgbuild."""

    def test_build_without_viewing(self, tmp_path: Path) -> None:
        """Skipping the view and accepting the build approves the package."""
        with (
            patch("aurctl.cli.display.typer.confirm", side_effect=[False, True]),
            patch("aurctl.cli.display.console") as mock_console,
        ):
            assert review_pkgbuild("foo", make_tree(tmp_path)) is True

        mock_console.pager.assert_not_called()

    def test_view_shows_pkgbuild(self, tmp_path: Path) -> None:
        """Viewing pages the PKGBUILD with syntax highlighting."""
        with (
            patch("aurctl.cli.display.typer.confirm", side_effect=[True, True]),
            patch("aurctl.cli.display.console") as mock_console,
        ):
            assert review_pkgbuild("foo", make_tree(tmp_path)) is True

        mock_console.pager.assert_called_once()
        shown = [call.args[0] for call in mock_console.print.call_args_list if call.args]
        syntax = next(item for item in shown if isinstance(item, Syntax))
        assert "build() { make; }" in syntax.code

    def test_decline(self, tmp_path: Path) -> None:
        """Refusing the build declines the package."""
        with (
            patch("aurctl.cli.display.typer.confirm", side_effect=[False, False]),
            patch("aurctl.cli.display.console", MagicMock()),
            patch("aurctl.cli.display.print_warning") as mock_warning,
        ):
            assert review_pkgbuild("foo", make_tree(tmp_path)) is False

        mock_warning.assert_called_once_with("Skipping foo")

    def test_missing_pkgbuild_still_asks(self, tmp_path: Path) -> None:
        """An unreadable PKGBUILD is reported and the build question follows."""
        with (
            patch("aurctl.cli.display.typer.confirm", side_effect=[True, True]) as mock_confirm,
            patch("aurctl.cli.display.console", MagicMock()),
            patch("aurctl.cli.display.print_warning") as mock_warning,
        ):
            assert review_pkgbuild("foo", tmp_path) is True

        assert mock_confirm.call_count == 2
        assert "Cannot read" in mock_warning.call_args.args[0]
