"""Package models for multi-source discovery.

This module defines the data structures for packages found in the
pacman repositories, the AUR, Flatpak and Snap, and the candidate type
that pairs a requested name with exactly one of them.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from aurctl.models.aur import PackageRecord


class PackageSource(Enum):
    """Enumeration of supported package sources."""

    REPO = "repo"
    AUR = "aur"
    FLATPAK = "flatpak"
    SNAP = "snap"

    @property
    def label(self) -> str:
        """Human-readable source name."""
        return _SOURCE_LABELS[self]


_SOURCE_LABELS: dict[PackageSource, str] = {
    PackageSource.REPO: "repository",
    PackageSource.AUR: "AUR",
    PackageSource.FLATPAK: "Flatpak",
    PackageSource.SNAP: "Snap",
}


@dataclass(frozen=True, slots=True)
class RepoPackage:
    """A package from the official pacman repositories.

    Attributes:
        repository: Repository name (e.g., 'core', 'extra').
        name: Package name.
        version: Available version string.
        description: One-line package description.
        installed: Whether the package is currently installed.
    """

    repository: str
    name: str
    version: str
    description: str = ""
    installed: bool = False


@dataclass(frozen=True, slots=True)
class FlatpakPackage:
    """A Flatpak application available from a configured remote.

    Attributes:
        name: Display name (e.g., 'Spotify').
        app_id: Application ID (e.g., 'com.spotify.Client').
        version: Application version, possibly empty.
        branch: Branch name (usually 'stable').
        origin: Remote the app comes from.
        description: One-line description.
    """

    name: str
    app_id: str
    version: str = ""
    branch: str = "stable"
    origin: str = "flathub"
    description: str = ""


@dataclass(frozen=True, slots=True)
class SnapPackage:
    """A snap available from the Snap Store."""

    name: str
    version: str
    publisher: str = ""
    description: str = ""


CandidatePackage = RepoPackage | PackageRecord | FlatpakPackage | SnapPackage


@dataclass(frozen=True, slots=True)
class PackageCandidate:
    """One place a requested package can be obtained from.

    Attributes:
        name: The name the user asked for.
        package: Source-specific package data; its type decides the source.
    """

    name: str
    package: CandidatePackage

    @property
    def source(self) -> PackageSource:
        """Return the source this candidate comes from."""
        if isinstance(self.package, RepoPackage):
            return PackageSource.REPO
        if isinstance(self.package, PackageRecord):
            return PackageSource.AUR
        if isinstance(self.package, FlatpakPackage):
            return PackageSource.FLATPAK
        return PackageSource.SNAP

    @property
    def install_id(self) -> str:
        """Identifier the owning backend installs this candidate by."""
        if isinstance(self.package, FlatpakPackage):
            return self.package.app_id
        return self.package.name

    @property
    def display_name(self) -> str:
        """Return 'prefix/name version' as shown in selection prompts."""
        pkg = self.package
        if isinstance(pkg, RepoPackage):
            status = " [installed]" if pkg.installed else ""
            return f"{pkg.repository}/{pkg.name} {pkg.version}{status}"
        return f"{self.source.value}/{pkg.name} {pkg.version}"

    @property
    def description(self) -> str | None:
        """Return the package description, if any."""
        return self.package.description or None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        if isinstance(self.package, PackageRecord):
            data = self.package.model_dump(mode="json", by_alias=True)
        else:
            data = asdict(self.package)
        return {"name": self.name, "source": self.source.value, "package": data}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PackageCandidate":
        """Deserialize from a dictionary produced by to_dict().

        Raises:
            KeyError: If a required key is missing.
            ValueError: If the source or package data is invalid.
        """
        source = PackageSource(data["source"])
        raw = data["package"]
        package: CandidatePackage
        if source == PackageSource.REPO:
            package = RepoPackage(**raw)
        elif source == PackageSource.AUR:
            package = PackageRecord.model_validate(raw)
        elif source == PackageSource.FLATPAK:
            package = FlatpakPackage(**raw)
        else:
            package = SnapPackage(**raw)
        return cls(name=data["name"], package=package)
