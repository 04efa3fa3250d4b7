"""Flatpak backend.

Searches configured remotes and installs applications using the
flatpak CLI.
"""

import logging

from aurctl.backends.base import AppStoreBackend, SearchResult
from aurctl.core.errors import InstallCancelledError
from aurctl.models.action import ActionResult, ActionType
from aurctl.models.package import FlatpakPackage, PackageSource
from aurctl.utils.shell import command_exists, run_cancellable, run_command

logger = logging.getLogger(__name__)

_SEARCH_COLUMNS = "--columns=name,description,application,version,branch"


def parse_search_output(output: str) -> list[FlatpakPackage]:
    """Parse tab-separated ``flatpak search`` output.

    Columns are name, description, application, version, branch. A header
    line starting with 'Name' is skipped.
    """
    packages: list[FlatpakPackage] = []
    for line in output.splitlines():
        if not line.strip() or line.startswith("Name"):
            continue

        parts = [part.strip() for part in line.split("\t")]
        name = parts[0]
        if not name:
            continue
        packages.append(
            FlatpakPackage(
                name=name,
                description=parts[1] if len(parts) > 1 else "",
                app_id=parts[2] if len(parts) > 2 and parts[2] else name,
                version=parts[3] if len(parts) > 3 else "",
                branch=parts[4] if len(parts) > 4 and parts[4] else "stable",
            )
        )
    return packages


class FlatpakBackend(AppStoreBackend):
    """Backend for Flatpak applications from Flathub."""

    # Timeout for flatpak search
    _SEARCH_TIMEOUT: float = 30.0

    def __init__(self, remote: str = "flathub") -> None:
        self.remote = remote

    @property
    def source(self) -> PackageSource:
        """Return FLATPAK as the package source."""
        return PackageSource.FLATPAK

    def is_available(self) -> bool:
        """Check if flatpak CLI is available."""
        return command_exists("flatpak")

    def search(self, query: str) -> list[FlatpakPackage]:
        """Search configured remotes.

        Raises:
            RuntimeError: If flatpak search fails.
        """
        result = run_command(
            ["flatpak", "search", _SEARCH_COLUMNS, query],
            timeout=self._SEARCH_TIMEOUT,
        )
        if not result.success:
            msg = f"flatpak search failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_search_output(result.stdout)

    def matches(self, query: str, package: SearchResult) -> bool:
        """Match on a name substring or the full app ID, ignoring case."""
        if not isinstance(package, FlatpakPackage):
            return False
        query = query.lower()
        return query in package.name.lower() or package.app_id.lower() == query

    def is_installed(self, app_id: str) -> bool:
        return run_command(["flatpak", "info", app_id]).success

    def install(self, package_id: str) -> ActionResult:
        """Install an application from the configured remote.

        The child process is attached to the terminal; Ctrl+C stops it.

        Raises:
            RuntimeError: If flatpak is not available.
            InstallCancelledError: If the user interrupts the install.
        """
        self._require_available()

        logger.info("Installing Flatpak: %s", package_id)
        try:
            returncode = run_cancellable(["flatpak", "install", "-y", self.remote, package_id])
        except KeyboardInterrupt as e:
            msg = f"Installation of {package_id} cancelled"
            raise InstallCancelledError(msg) from e

        if returncode == 0:
            return self._result(ActionType.INSTALL, package_id, True)
        return self._result(
            ActionType.INSTALL,
            package_id,
            False,
            error=f"flatpak install exited with code {returncode}",
        )

    def uninstall(self, package_id: str) -> ActionResult:
        """Uninstall an application.

        Raises:
            RuntimeError: If flatpak is not available.
        """
        self._require_available()

        logger.info("Uninstalling Flatpak: %s", package_id)
        result = run_command(["flatpak", "uninstall", "-y", package_id], timeout=300.0)
        if result.success:
            return self._result(ActionType.REMOVE, package_id, True)
        return self._result(
            ActionType.REMOVE,
            package_id,
            False,
            error=result.stderr.strip() or "Unknown error",
        )
