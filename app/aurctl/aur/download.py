"""Fetching AUR build trees.

A package tree lives at ``<clone_dir>/<name>``. It is updated in place
with git when possible and re-created from the snapshot tarball
otherwise. A tree holding built packages is never deleted.
"""

import asyncio
import io
import logging
import shutil
import subprocess
import tarfile
from pathlib import Path

from aurctl.aur.client import AurClient
from aurctl.core.errors import DownloadFailedError
from aurctl.utils.shell import CommandResult, ShellRunner, ToolRunner

logger = logging.getLogger(__name__)

# File name suffixes makepkg gives to finished packages
BUILT_PACKAGE_SUFFIXES: tuple[str, ...] = (".pkg.tar.zst", ".pkg.tar.xz")


class DirectoryRemovalError(DownloadFailedError):
    """Raised when an existing package directory cannot be cleared.

    This usually means files owned by root; it is never retried through
    another download method.
    """


def has_built_packages(pkg_dir: Path) -> bool:
    """Check whether a directory contains makepkg output.

    Args:
        pkg_dir: Package directory to inspect.

    Returns:
        True if any entry name ends with a built package suffix.
    """
    try:
        return any(entry.name.endswith(BUILT_PACKAGE_SUFFIXES) for entry in pkg_dir.iterdir())
    except OSError:
        return False


def remove_package_dir(pkg_dir: Path) -> None:
    """Delete a package directory.

    Raises:
        DirectoryRemovalError: If the directory cannot be removed, with the
            manual removal command in the message.
    """
    try:
        shutil.rmtree(pkg_dir)
    except OSError as e:
        msg = (
            f"Cannot remove existing directory: {e}\n"
            "This may be due to permission issues (files owned by root).\n"
            f"Try: sudo rm -rf {pkg_dir}"
        )
        raise DirectoryRemovalError(msg) from e


class PackageFetcher:
    """Acquire buildable PKGBUILD trees for AUR packages.

    Attributes:
        clone_dir: Root directory holding one subdirectory per package.
        use_git_clone: Try git before falling back to snapshot tarballs.
    """

    def __init__(
        self,
        client: AurClient,
        clone_dir: Path,
        *,
        use_git_clone: bool = True,
        runner: ToolRunner | None = None,
    ) -> None:
        self._client = client
        self.clone_dir = clone_dir
        self.use_git_clone = use_git_clone
        self._runner = runner or ShellRunner()

    def package_dir(self, name: str) -> Path:
        return self.clone_dir / name

    async def acquire(self, name: str) -> Path:
        """Make the build tree for ``name`` available locally.

        Args:
            name: Package base name.

        Returns:
            Path to the package directory.

        Raises:
            DownloadFailedError: If the clone root cannot be created or
                neither git nor the snapshot tarball produced a usable tree.
        """
        try:
            self.clone_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = (
                f"Cannot create clone directory {self.clone_dir}: {e}\n"
                f"Try: sudo chown -R $USER {self.clone_dir.parent}"
            )
            raise DownloadFailedError(msg) from e
        pkg_dir = self.package_dir(name)

        if self.use_git_clone:
            try:
                return await asyncio.to_thread(self._git_acquire, name, pkg_dir)
            except DirectoryRemovalError:
                raise
            except DownloadFailedError as e:
                logger.warning("Git download failed, using tarball: %s", e)

        return await self._tarball_acquire(name, pkg_dir)

    def _git_acquire(self, name: str, pkg_dir: Path) -> Path:
        """Clone or update the package tree with git."""
        if pkg_dir.exists():
            if self._is_checkout(pkg_dir):
                self._update_checkout(pkg_dir)
                return pkg_dir

            logger.warning("%s is not a git checkout, will try to re-clone", pkg_dir)
            if has_built_packages(pkg_dir):
                logger.warning(
                    "Package directory contains built packages, keeping existing directory"
                )
                return pkg_dir
            remove_package_dir(pkg_dir)

        result = self._git(["git", "clone", self._client.git_url(name), str(pkg_dir)])
        if not result.success:
            msg = f"Git clone failed: {result.stderr.strip() or result.stdout.strip()}"
            raise DownloadFailedError(msg)
        return pkg_dir

    def _is_checkout(self, pkg_dir: Path) -> bool:
        if not (pkg_dir / ".git").exists():
            return False
        result = self._git(["git", "rev-parse", "--is-inside-work-tree"], cwd=pkg_dir)
        return result.success

    def _update_checkout(self, pkg_dir: Path) -> None:
        """Fetch and hard-reset to upstream; failures keep the current tree."""
        fetch = self._git(["git", "fetch", "origin"], cwd=pkg_dir)
        if not fetch.success:
            logger.warning(
                "Failed to fetch updates: %s, will use existing version", fetch.stderr.strip()
            )
            return

        reset = self._git(["git", "reset", "--hard", "origin/HEAD"], cwd=pkg_dir)
        if not reset.success:
            logger.warning(
                "Failed to reset to upstream: %s, will use existing version",
                reset.stderr.strip(),
            )

    def _git(self, args: list[str], cwd: Path | None = None) -> CommandResult:
        try:
            return self._runner.capture(args, cwd=str(cwd) if cwd else None)
        except (OSError, subprocess.TimeoutExpired) as e:
            msg = f"Cannot run git: {e}"
            raise DownloadFailedError(msg) from e

    async def _tarball_acquire(self, name: str, pkg_dir: Path) -> Path:
        """Download and unpack the snapshot tarball."""
        data = await self._client.download_snapshot(name)

        if pkg_dir.exists():
            if has_built_packages(pkg_dir):
                logger.warning(
                    "Package directory contains built packages, keeping existing directory"
                )
                return pkg_dir
            await asyncio.to_thread(remove_package_dir, pkg_dir)

        await asyncio.to_thread(self._extract, data)

        if not pkg_dir.is_dir():
            msg = f"Package directory not found after extraction: {pkg_dir}"
            raise DownloadFailedError(msg)
        return pkg_dir

    def _extract(self, data: bytes) -> None:
        """Unpack a gzip tarball into the clone directory.

        Raises:
            DownloadFailedError: If the archive is corrupt or a member would
                land outside the clone directory.
        """
        try:
            with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
                archive.extractall(self.clone_dir, filter="data")
        except (tarfile.TarError, OSError) as e:
            msg = f"Failed to extract package archive: {e}"
            raise DownloadFailedError(msg) from e
