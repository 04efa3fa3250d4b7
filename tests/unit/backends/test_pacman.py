"""Unit tests for PacmanBackend.

Tests for the pacman repository backend and its output parsers.
"""

from unittest.mock import patch

import pytest
from aurctl.backends.pacman import PacmanBackend, parse_info_fields, parse_search_output
from aurctl.models.action import ActionType
from aurctl.models.package import PackageSource
from aurctl.utils.shell import CommandResult


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", returncode=0)


def fail(stderr: str = "", returncode: int = 1) -> CommandResult:
    return CommandResult(stdout="", stderr=stderr, returncode=returncode)


class TestParseSearchOutput:
    """Tests for parse_search_output."""

    def test_parses_entries(self, mock_pacman_search_output: str) -> None:
        """Each two-line entry becomes a RepoPackage."""
        packages = parse_search_output(mock_pacman_search_output)

        assert [p.name for p in packages] == [
            "firefox",
            "firefox-developer-edition",
            "firefox-tridactyl",
        ]
        first = packages[0]
        assert first.repository == "extra"
        assert first.version == "131.0-1"
        assert first.installed is True
        assert first.description == "Fast, Private & Safe Web Browser"
        assert packages[1].installed is False
        assert packages[2].repository == "community"

    def test_empty_output(self) -> None:
        """Empty output yields no packages."""
        assert parse_search_output("") == []


class TestParseInfoFields:
    """Tests for parse_info_fields."""

    def test_parses_key_values(self, mock_pacman_info_output: str) -> None:
        """Key/value lines are parsed; continuation lines are ignored."""
        fields = parse_info_fields(mock_pacman_info_output)

        assert fields["Name"] == "vim"
        assert fields["Repository"] == "extra"
        assert fields["Install Reason"] == "Explicitly installed"
        assert fields["Depends On"].startswith("vim-runtime=9.1.0-1")


class TestPacmanBackend:
    """Tests for PacmanBackend class."""

    @pytest.fixture
    def backend(self) -> PacmanBackend:
        """Create PacmanBackend instance."""
        return PacmanBackend()

    def test_source_is_repo(self, backend: PacmanBackend) -> None:
        """Backend returns REPO as source."""
        assert backend.source == PackageSource.REPO

    def test_is_available(self, backend: PacmanBackend) -> None:
        """is_available follows command_exists."""
        with patch("aurctl.backends.pacman.command_exists", return_value=False):
            assert backend.is_available() is False

    def test_search_no_match_returns_empty(self, backend: PacmanBackend) -> None:
        """pacman -Ss exit code 1 means no matches."""
        with patch("aurctl.backends.pacman.run_command", return_value=fail()):
            assert backend.search("nothing") == []

    def test_get_package_details(
        self, backend: PacmanBackend, mock_pacman_info_output: str
    ) -> None:
        """Details come from pacman -Si plus an installed check."""
        with patch("aurctl.backends.pacman.run_command") as mock_run:
            mock_run.side_effect = [ok(mock_pacman_info_output), fail()]
            pkg = backend.get_package_details("vim")

        assert pkg is not None
        assert pkg.repository == "extra"
        assert pkg.version == "9.1.0-1"
        assert pkg.installed is False
        assert mock_run.call_args_list[0][0][0] == ["pacman", "-Si", "vim"]
        assert mock_run.call_args_list[1][0][0] == ["pacman", "-Q", "vim"]

    def test_get_package_details_missing(self, backend: PacmanBackend) -> None:
        """Unknown packages return None."""
        with patch("aurctl.backends.pacman.run_command", return_value=fail()):
            assert backend.get_package_details("nope") is None

    def test_install_reason(self, backend: PacmanBackend) -> None:
        """install_reason reads the Install Reason field."""
        output = "Name : go\nInstall Reason : Installed as a dependency for another package\n"
        with patch("aurctl.backends.pacman.run_command", return_value=ok(output)):
            reason = backend.install_reason("go")

        assert reason == "Installed as a dependency for another package"

    def test_install_reason_not_installed(self, backend: PacmanBackend) -> None:
        """install_reason is None when pacman -Qi fails."""
        with patch("aurctl.backends.pacman.run_command", return_value=fail()):
            assert backend.install_reason("go") is None

    def test_list_foreign(self, backend: PacmanBackend) -> None:
        """pacman -Qm lines become (name, version) pairs."""
        output = "yay 12.3.5-1\nparu-bin 2.0.3-1\n\n"
        with patch("aurctl.backends.pacman.run_command", return_value=ok(output)):
            assert backend.list_foreign() == [("yay", "12.3.5-1"), ("paru-bin", "2.0.3-1")]

    @pytest.mark.parametrize(("stdout", "expected"), [("-1\n", -1), ("0\n", 0), ("1\n", 1)])
    def test_vercmp(self, backend: PacmanBackend, stdout: str, expected: int) -> None:
        """vercmp output is parsed as an integer."""
        with patch("aurctl.backends.pacman.run_command", return_value=ok(stdout)):
            assert backend.vercmp("1.0-1", "1.1-1") == expected

    def test_vercmp_garbage_raises(self, backend: PacmanBackend) -> None:
        """Unexpected vercmp output raises RuntimeError."""
        with (
            patch("aurctl.backends.pacman.run_command", return_value=ok("")),
            pytest.raises(RuntimeError, match="vercmp failed"),
        ):
            backend.vercmp("a", "b")

    def test_install_single_transaction(self, backend: PacmanBackend) -> None:
        """All packages are installed with one interactive pacman call."""
        with patch("aurctl.backends.pacman.run_interactive", return_value=0) as mock_run:
            results = backend.install(["vim", "git"], ["--noconfirm"])

        mock_run.assert_called_once_with(["sudo", "pacman", "-S", "vim", "git", "--noconfirm"])
        assert [r.action.package for r in results] == ["vim", "git"]
        assert all(r.success for r in results)
        assert results[0].action.action_type == ActionType.INSTALL

    def test_install_failure_marks_all(self, backend: PacmanBackend) -> None:
        """A failed transaction fails every package."""
        with patch("aurctl.backends.pacman.run_interactive", return_value=1):
            results = backend.install(["vim", "git"])

        assert all(r.failed for r in results)
        assert results[0].error == "pacman exited with code 1"

    def test_install_empty(self, backend: PacmanBackend) -> None:
        """Nothing to install runs nothing."""
        with patch("aurctl.backends.pacman.run_interactive") as mock_run:
            assert backend.install([]) == []
        mock_run.assert_not_called()

    def test_remove_failure_carries_stderr(self, backend: PacmanBackend) -> None:
        """Removal errors carry pacman's stderr."""
        with patch(
            "aurctl.backends.pacman.run_command",
            return_value=fail("error: target not found: go"),
        ) as mock_run:
            results = backend.remove(["go"], ["--noconfirm", "--recursive"])

        args = mock_run.call_args[0][0]
        assert args == ["sudo", "pacman", "-R", "go", "--noconfirm", "--recursive"]
        assert results[0].failed
        assert results[0].error == "error: target not found: go"
        assert results[0].action.action_type == ActionType.REMOVE
