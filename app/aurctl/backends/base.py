"""Abstract base classes for package backends.

A backend wraps one external package manager's command-line tool and
exposes the narrow search/install surface aurctl needs.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from aurctl.models.action import Action, ActionResult, ActionType
from aurctl.models.package import FlatpakPackage, PackageSource, RepoPackage, SnapPackage

SearchResult = RepoPackage | FlatpakPackage | SnapPackage


class Backend(ABC):
    """Abstract base class for all package backends.

    Example:
        >>> backend = FlatpakBackend()
        >>> if backend.is_available():
        ...     for pkg in backend.search("spotify"):
        ...         print(pkg.name)
    """

    @property
    @abstractmethod
    def source(self) -> PackageSource:
        """Return the package source this backend handles."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def search(self, query: str) -> Sequence[SearchResult]:
        """Search the backend for packages matching ``query``.

        Returns:
            Matching packages; empty when the tool reports no matches.
        """


class AppStoreBackend(Backend):
    """Base class for sandboxed app-store backends (Flatpak, Snap)."""

    @abstractmethod
    def matches(self, query: str, package: SearchResult) -> bool:
        """Check whether a search hit counts as a match for ``query``."""

    @abstractmethod
    def is_installed(self, package_id: str) -> bool:
        """Check whether an application is already installed."""

    @abstractmethod
    def install(self, package_id: str) -> ActionResult:
        """Install one application.

        Raises:
            RuntimeError: If the backend is not available.
            InstallCancelledError: If the user interrupts the install.
        """

    @abstractmethod
    def uninstall(self, package_id: str) -> ActionResult:
        """Uninstall one application.

        Raises:
            RuntimeError: If the backend is not available.
        """

    def _require_available(self) -> None:
        if not self.is_available():
            msg = f"{self.source.label} is not available on this system"
            raise RuntimeError(msg)

    def _result(
        self,
        action_type: ActionType,
        package_id: str,
        success: bool,
        *,
        error: str | None = None,
    ) -> ActionResult:
        action = Action(action_type=action_type, package=package_id, source=self.source)
        return ActionResult(action=action, success=success, error=error)
