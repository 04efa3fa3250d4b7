"""Unit tests for package models.

Tests for PackageCandidate and the source-specific package types.
"""

import pytest
from aurctl.models.aur import PackageRecord
from aurctl.models.package import (
    FlatpakPackage,
    PackageCandidate,
    PackageSource,
    RepoPackage,
    SnapPackage,
)
from factories import aur_json, record


class TestPackageSource:
    """Tests for PackageSource enum."""

    def test_values(self) -> None:
        """Sources serialize to their lowercase names."""
        assert [s.value for s in PackageSource] == ["repo", "aur", "flatpak", "snap"]

    def test_labels(self) -> None:
        """Every source has a readable label."""
        assert PackageSource.AUR.label == "AUR"
        assert PackageSource.REPO.label == "repository"


class TestPackageCandidate:
    """Tests for PackageCandidate."""

    def test_source_follows_package_type(self) -> None:
        """The candidate's source is derived from its package type."""
        repo = PackageCandidate("x", RepoPackage(repository="extra", name="x", version="1"))
        aur = PackageCandidate("x", record("x"))
        flatpak = PackageCandidate("x", FlatpakPackage(name="X", app_id="org.x.X"))
        snap = PackageCandidate("x", SnapPackage(name="x", version="1"))

        assert [c.source for c in (repo, aur, flatpak, snap)] == list(PackageSource)

    def test_install_id(self) -> None:
        """Flatpaks install by application ID, everything else by name."""
        flatpak = PackageCandidate(
            "spotify", FlatpakPackage(name="Spotify", app_id="com.spotify.Client")
        )
        snap = PackageCandidate("spotify", SnapPackage(name="spotify", version="1"))

        assert flatpak.install_id == "com.spotify.Client"
        assert snap.install_id == "spotify"

    def test_display_name(self) -> None:
        """Repository candidates show their repository and install state."""
        repo = PackageCandidate(
            "vim",
            RepoPackage(repository="extra", name="vim", version="9.1-1", installed=True),
        )
        aur = PackageCandidate("yay", record("yay", Version="12.3-1"))

        assert repo.display_name == "extra/vim 9.1-1 [installed]"
        assert aur.display_name == "aur/yay 12.3-1"

    def test_empty_description_is_none(self) -> None:
        """Blank descriptions are reported as None."""
        candidate = PackageCandidate("x", SnapPackage(name="x", version="1"))

        assert candidate.description is None

    @pytest.mark.parametrize(
        "package",
        [
            RepoPackage(repository="core", name="glibc", version="2.40-1", installed=True),
            FlatpakPackage(name="Spotify", app_id="com.spotify.Client", version="1.2"),
            SnapPackage(name="spotify", version="1.2", publisher="spotify**"),
        ],
    )
    def test_dict_round_trip(self, package: RepoPackage | FlatpakPackage | SnapPackage) -> None:
        """to_dict and from_dict preserve dataclass packages."""
        candidate = PackageCandidate("query", package)

        assert PackageCandidate.from_dict(candidate.to_dict()) == candidate

    def test_aur_dict_uses_rpc_keys(self) -> None:
        """AUR records serialize with the RPC field names."""
        candidate = PackageCandidate("yay", record("yay", Depends=["pacman>6.1", "git"]))

        data = candidate.to_dict()

        assert data["source"] == "aur"
        assert data["package"]["Name"] == "yay"
        assert data["package"]["Depends"] == ["pacman>6.1", "git"]
        assert PackageCandidate.from_dict(data) == candidate

    def test_from_dict_unknown_source(self) -> None:
        """An unknown source is rejected."""
        with pytest.raises(ValueError):
            PackageCandidate.from_dict({"name": "x", "source": "brew", "package": {}})


class TestPackageRecord:
    """Tests for the AUR PackageRecord model."""

    def test_parses_rpc_fields(self) -> None:
        """PascalCase RPC keys map to snake_case attributes."""
        pkg = PackageRecord.model_validate(
            aur_json("yay", MakeDepends=["go>=1.21"], OutOfDate=1_700_000_000)
        )

        assert pkg.package_base == "yay"
        assert pkg.make_depends == ("go>=1.21",)
        assert pkg.is_out_of_date is True

    def test_all_depends_order(self) -> None:
        """all_depends lists runtime dependencies before make dependencies."""
        pkg = record("foo", Depends=["a", "b"], MakeDepends=["c"])

        assert pkg.all_depends == ["a", "b", "c"]

    def test_ignores_unknown_fields(self) -> None:
        """New RPC fields do not break parsing."""
        pkg = PackageRecord.model_validate(aur_json("foo", Submitter="someone"))

        assert pkg.name == "foo"
