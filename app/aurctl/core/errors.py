"""Error types raised by aurctl.

Every error that crosses a module boundary derives from AurctlError so the
CLI can report it with a single handler.
"""


class AurctlError(Exception):
    """Base exception for all aurctl errors."""


class InvalidInputError(AurctlError):
    """Raised when a request is malformed (e.g. a too-short search query)."""


class RemoteError(AurctlError):
    """Raised when the AUR RPC API reports an error or cannot be reached."""


class PackageNotFoundError(AurctlError):
    """Raised when a lookup for a specific package name returns no results."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Package not found: {name}")


class DownloadFailedError(AurctlError):
    """Raised when a package tree cannot be fetched or extracted."""


class BuildFailedError(AurctlError):
    """Raised when makepkg cannot build a package."""

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        self.exit_code = exit_code
        super().__init__(message)


class DependencyCycleError(AurctlError):
    """Raised when AUR packages depend on each other in a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Dependency cycle detected: {' -> '.join(cycle)}")


class InstallCancelledError(AurctlError):
    """Raised when the user interrupts a running install."""


class ConfigError(AurctlError):
    """Raised when the configuration cannot be loaded or saved."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""
