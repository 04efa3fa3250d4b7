"""Building AUR packages with makepkg.

makepkg runs attached to the terminal so it can prompt for sudo and
dependency choices itself.
"""

import logging
from pathlib import Path

from aurctl.backends.pacman import PacmanBackend
from aurctl.core.errors import BuildFailedError
from aurctl.core.resolver import strip_version
from aurctl.models.aur import PackageRecord
from aurctl.utils.shell import ShellRunner, ToolRunner

logger = logging.getLogger(__name__)

# makepkg exit status when installing dependencies with pacman failed
MAKEPKG_DEPENDENCY_FAILURE = 8

DEPENDENCY_FAILURE_MESSAGE = (
    "Dependency installation failed.\n\n"
    "This can happen if you:\n"
    "  - Interrupted the operation (Ctrl+C)\n"
    "  - Rejected removing a conflicting package\n"
    "  - Have network/download issues\n\n"
    "Try: aurctl install <deps> to install dependencies manually"
)


def is_dependency_install(reason: str | None) -> bool:
    """Check whether a pacman install reason marks a dependency.

    An unknown reason counts as a dependency.
    """
    return reason is None or "dependency" in reason.lower()


class BuildOrchestrator:
    """Run makepkg in package directories and tidy up afterwards."""

    def __init__(
        self, runner: ToolRunner | None = None, repo_backend: PacmanBackend | None = None
    ) -> None:
        self._runner = runner or ShellRunner()
        self._repo = repo_backend or PacmanBackend()

    def build_and_install(self, pkg_dir: Path, install: bool = True) -> None:
        """Build the package in ``pkg_dir`` and optionally install it.

        Args:
            pkg_dir: Directory containing the PKGBUILD.
            install: Pass ``-i`` so makepkg installs the result.

        Raises:
            BuildFailedError: If there is no PKGBUILD or makepkg fails.
        """
        if not (pkg_dir / "PKGBUILD").exists():
            msg = f"PKGBUILD not found in {pkg_dir}"
            raise BuildFailedError(msg)

        args = ["makepkg", "-s"]
        if install:
            args.append("-i")

        logger.info("Building package in %s", pkg_dir)
        try:
            exit_code = self._runner.run(args, cwd=str(pkg_dir))
        except OSError as e:
            msg = f"Cannot run makepkg: {e}"
            raise BuildFailedError(msg) from e

        if exit_code == MAKEPKG_DEPENDENCY_FAILURE:
            raise BuildFailedError(DEPENDENCY_FAILURE_MESSAGE, exit_code=exit_code)
        if exit_code != 0:
            msg = f"makepkg failed with exit code {exit_code}"
            raise BuildFailedError(msg, exit_code=exit_code)
        logger.info("Package built successfully")

    def build_and_install_with_cleanup(
        self,
        pkg_dir: Path,
        install: bool,
        record: PackageRecord,
        remove_make_deps: bool,
    ) -> list[str]:
        """Build like build_and_install(), then optionally drop make deps.

        Returns:
            Names of the make dependencies that were removed.

        Raises:
            BuildFailedError: If the build itself fails. Cleanup failures
                are logged only.
        """
        self.build_and_install(pkg_dir, install)
        if not remove_make_deps:
            return []
        return self.remove_make_dependencies(record)

    def removable_make_dependencies(self, record: PackageRecord) -> list[str]:
        """Select make deps that are installed and were pulled in as dependencies."""
        removable: list[str] = []
        for dependency in record.make_depends:
            name = strip_version(dependency)
            if not self._repo.is_installed(name):
                continue
            if is_dependency_install(self._repo.install_reason(name)):
                removable.append(name)
            else:
                logger.info("%s was explicitly installed, keeping it", name)
        return removable

    def remove_make_dependencies(self, record: PackageRecord) -> list[str]:
        """Remove the make deps selected by removable_make_dependencies().

        Returns:
            Names removed; empty if there was nothing to remove or removal
            failed.
        """
        removable = self.removable_make_dependencies(record)
        if not removable:
            logger.info("No make dependencies to remove for %s", record.name)
            return []

        results = self._repo.remove(removable, ["--noconfirm", "--recursive"])
        failed = [result for result in results if result.failed]
        if failed:
            logger.warning("Failed to remove make dependencies: %s", failed[0].error)
            return []
        logger.info("Removed make dependencies: %s", ", ".join(removable))
        return removable
