"""Snap backend.

Searches the Snap Store and installs snaps using the snap CLI.
"""

import logging

from aurctl.backends.base import AppStoreBackend, SearchResult
from aurctl.core.errors import InstallCancelledError
from aurctl.models.action import ActionResult, ActionType
from aurctl.models.package import PackageSource, SnapPackage
from aurctl.utils.shell import command_exists, run_cancellable, run_command

logger = logging.getLogger(__name__)


def parse_find_output(output: str) -> list[SnapPackage]:
    """Parse whitespace-aligned ``snap find`` output.

    The first line is a header. Columns are name, version, publisher,
    notes and the rest of the line as summary; shorter lines are skipped.
    """
    packages: list[SnapPackage] = []
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 4:
            continue
        packages.append(
            SnapPackage(
                name=parts[0],
                version=parts[1],
                publisher=parts[2],
                description=" ".join(parts[4:]),
            )
        )
    return packages


class SnapBackend(AppStoreBackend):
    """Backend for snaps from the Snap Store."""

    # Timeout for snap find
    _SEARCH_TIMEOUT: float = 30.0

    @property
    def source(self) -> PackageSource:
        """Return SNAP as the package source."""
        return PackageSource.SNAP

    def is_available(self) -> bool:
        """Check if snap CLI is available."""
        return command_exists("snap")

    def search(self, query: str) -> list[SnapPackage]:
        """Search the Snap Store.

        Raises:
            RuntimeError: If snap find fails.
        """
        result = run_command(["snap", "find", query], timeout=self._SEARCH_TIMEOUT)
        if not result.success:
            msg = f"snap find failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_find_output(result.stdout)

    def matches(self, query: str, package: SearchResult) -> bool:
        """Match on a case-insensitive name substring."""
        if not isinstance(package, SnapPackage):
            return False
        return query.lower() in package.name.lower()

    def is_installed(self, name: str) -> bool:
        return run_command(["snap", "list", name]).success

    def install(self, package_id: str) -> ActionResult:
        """Install a snap.

        Raises:
            RuntimeError: If snap is not available.
            InstallCancelledError: If the user interrupts the install.
        """
        self._require_available()

        logger.info("Installing Snap: %s", package_id)
        try:
            returncode = run_cancellable(["sudo", "snap", "install", package_id])
        except KeyboardInterrupt as e:
            msg = f"Installation of {package_id} cancelled"
            raise InstallCancelledError(msg) from e

        if returncode == 0:
            return self._result(ActionType.INSTALL, package_id, True)
        return self._result(
            ActionType.INSTALL,
            package_id,
            False,
            error=f"snap install exited with code {returncode}",
        )

    def uninstall(self, package_id: str) -> ActionResult:
        """Remove a snap.

        Raises:
            RuntimeError: If snap is not available.
        """
        self._require_available()

        logger.info("Removing Snap: %s", package_id)
        result = run_command(["sudo", "snap", "remove", package_id], timeout=300.0)
        if result.success:
            return self._result(ActionType.REMOVE, package_id, True)
        return self._result(
            ActionType.REMOVE,
            package_id,
            False,
            error=result.stderr.strip() or "Unknown error",
        )
