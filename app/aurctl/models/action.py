"""Action models for backend operations.

This module defines data structures for representing install and
uninstall actions against a package backend and their results.
"""

from dataclasses import dataclass
from enum import Enum

from aurctl.models.package import PackageSource


class ActionType(Enum):
    """Type of package management action."""

    INSTALL = "install"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class Action:
    """A single package management action.

    Attributes:
        action_type: The type of action (install or remove).
        package: Name or application ID of the package.
        source: Backend that handles this package.
    """

    action_type: ActionType
    package: str
    source: PackageSource

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a package management action.

    Attributes:
        action: The action that was executed.
        success: Whether the action completed successfully.
        error: Optional error message if the action failed.
    """

    action: Action
    success: bool
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success
