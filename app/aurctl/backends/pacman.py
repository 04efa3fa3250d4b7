"""Pacman repository backend.

Queries the official repositories and the local package database with
the pacman CLI, and installs or removes packages through sudo.
"""

import logging

from aurctl.backends.base import Backend
from aurctl.models.action import Action, ActionResult, ActionType
from aurctl.models.package import PackageSource, RepoPackage
from aurctl.utils.shell import command_exists, run_command, run_interactive

logger = logging.getLogger(__name__)


def parse_search_output(output: str) -> list[RepoPackage]:
    """Parse ``pacman -Ss`` output.

    Each hit spans two lines::

        extra/firefox 131.0-1 [installed]
            Fast, Private & Safe Web Browser

    Args:
        output: Raw stdout of ``pacman -Ss``.

    Returns:
        Packages in output order.
    """
    packages: list[RepoPackage] = []
    lines = output.splitlines()
    i = 0
    while i < len(lines):
        line = lines[i]
        head, _, rest = line.partition(" ")
        repository, slash, name = head.partition("/")
        if not slash or line.startswith((" ", "\t")):
            i += 1
            continue

        fields = rest.split()
        description = lines[i + 1].strip() if i + 1 < len(lines) else ""
        packages.append(
            RepoPackage(
                repository=repository,
                name=name,
                version=fields[0] if fields else "",
                description=description,
                installed="[installed" in rest,
            )
        )
        i += 2
    return packages


def parse_info_fields(output: str) -> dict[str, str]:
    """Parse ``Key : value`` lines of ``pacman -Si``/``-Qi`` output.

    Only the first line of multi-line values is kept.
    """
    fields: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if not sep or line.startswith((" ", "\t")):
            continue
        fields.setdefault(key.strip(), value.strip())
    return fields


class PacmanBackend(Backend):
    """Backend for the official Arch Linux repositories."""

    # Timeout for read-only queries
    _QUERY_TIMEOUT: float = 60.0
    # Timeout for captured removals
    _REMOVE_TIMEOUT: float = 300.0

    @property
    def source(self) -> PackageSource:
        """Return REPO as the package source."""
        return PackageSource.REPO

    def is_available(self) -> bool:
        """Check if pacman CLI is available."""
        return command_exists("pacman")

    def search(self, query: str) -> list[RepoPackage]:
        """Search the sync databases.

        Returns:
            Matching packages; empty when pacman finds nothing.
        """
        result = run_command(["pacman", "-Ss", query], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            # pacman -Ss exits 1 when nothing matches
            return []
        return parse_search_output(result.stdout)

    def get_package_details(self, name: str) -> RepoPackage | None:
        """Look up one package with ``pacman -Si``.

        Returns:
            The package, or None if no repository provides it.
        """
        result = run_command(["pacman", "-Si", name], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            return None

        fields = parse_info_fields(result.stdout)
        if not fields.get("Name"):
            return None
        return RepoPackage(
            repository=fields.get("Repository", ""),
            name=fields["Name"],
            version=fields.get("Version", ""),
            description=fields.get("Description", ""),
            installed=self.is_installed(fields["Name"]),
        )

    def in_repos(self, name: str) -> bool:
        """Check whether any sync repository provides ``name``."""
        return run_command(["pacman", "-Si", name], timeout=self._QUERY_TIMEOUT).success

    def is_installed(self, name: str) -> bool:
        """Check whether ``name`` is present in the local database."""
        return run_command(["pacman", "-Q", name], timeout=self._QUERY_TIMEOUT).success

    def install_reason(self, name: str) -> str | None:
        """Get the ``Install Reason`` field of an installed package.

        Returns:
            The reason text (e.g., 'Installed as a dependency for another
            package'), or None if it cannot be determined.
        """
        result = run_command(["pacman", "-Qi", name], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            return None
        return parse_info_fields(result.stdout).get("Install Reason")

    def list_foreign(self) -> list[tuple[str, str]]:
        """List installed packages not found in any sync database.

        Returns:
            (name, version) pairs from ``pacman -Qm``.
        """
        result = run_command(["pacman", "-Qm"], timeout=self._QUERY_TIMEOUT)
        if not result.success:
            return []

        packages: list[tuple[str, str]] = []
        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 2:
                packages.append((parts[0], parts[1]))
        return packages

    def vercmp(self, left: str, right: str) -> int:
        """Compare two version strings with pacman's ``vercmp``.

        Returns:
            -1 if left is older, 0 if equal, 1 if newer.

        Raises:
            RuntimeError: If vercmp fails or prints something unexpected.
        """
        result = run_command(["vercmp", left, right], timeout=self._QUERY_TIMEOUT)
        try:
            value = int(result.stdout.strip())
        except ValueError as e:
            msg = f"vercmp failed for {left!r} and {right!r}: {result.stderr.strip()}"
            raise RuntimeError(msg) from e
        return max(-1, min(1, value))

    def install(
        self, packages: list[str], extra_args: list[str] | None = None
    ) -> list[ActionResult]:
        """Install repository packages with one ``sudo pacman -S`` call.

        pacman runs attached to the terminal so it can prompt. All packages
        share the outcome of the single transaction.

        Returns:
            List of ActionResult for each package.
        """
        if not packages:
            return []

        args = ["sudo", "pacman", "-S", *packages, *(extra_args or [])]
        logger.info("Installing from repositories: %s", ", ".join(packages))
        returncode = run_interactive(args)

        if returncode == 0:
            return self._results(ActionType.INSTALL, packages, True)
        error = f"pacman exited with code {returncode}"
        return self._results(ActionType.INSTALL, packages, False, error=error)

    def remove(
        self, packages: list[str], extra_args: list[str] | None = None
    ) -> list[ActionResult]:
        """Remove packages with one captured ``sudo pacman -R`` call.

        Returns:
            List of ActionResult for each package.
        """
        if not packages:
            return []

        args = ["sudo", "pacman", "-R", *packages, *(extra_args or [])]
        logger.info("Removing packages: %s", ", ".join(packages))
        result = run_command(args, timeout=self._REMOVE_TIMEOUT)

        if result.success:
            return self._results(ActionType.REMOVE, packages, True)
        error = result.stderr.strip() or "Package removal failed"
        return self._results(ActionType.REMOVE, packages, False, error=error)

    def _results(
        self,
        action_type: ActionType,
        packages: list[str],
        success: bool,
        *,
        error: str | None = None,
    ) -> list[ActionResult]:
        return [
            ActionResult(
                action=Action(action_type=action_type, package=pkg, source=PackageSource.REPO),
                success=success,
                error=error,
            )
            for pkg in packages
        ]
