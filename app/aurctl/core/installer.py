"""Install pipeline.

Turns package specs into installed packages: find sources, pick one
candidate per name, then install repository packages with pacman, build
AUR packages in dependency order, and hand app-store packages to their
backend.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from aurctl.core.context import AppContext
from aurctl.core.errors import BuildFailedError, DownloadFailedError
from aurctl.core.sources import parse_package_spec
from aurctl.models.aur import PackageRecord
from aurctl.models.package import PackageCandidate, PackageSource, RepoPackage

logger = logging.getLogger(__name__)

# Picks one candidate when several sources provide a name; None skips it.
CandidateChooser = Callable[[str, list[PackageCandidate]], PackageCandidate | None]

# Shows a fetched build tree before it is built; False declines the package.
PkgbuildReviewer = Callable[[str, Path], bool]


@dataclass
class InstallReport:
    """Outcome of one install run.

    Attributes:
        installed: Names installed successfully.
        skipped: Names already installed or declined by the user.
        failed: (name, reason) pairs.
        planned: 'source/name' entries a dry run would have installed, in
            execution order.
    """

    installed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)
    planned: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


class Installer:
    """Drive the full install of a list of package specs."""

    def __init__(
        self,
        context: AppContext,
        chooser: CandidateChooser,
        reviewer: PkgbuildReviewer | None = None,
    ) -> None:
        self._ctx = context
        self._chooser = chooser
        self._reviewer = reviewer

    async def install(
        self,
        specs: list[str],
        noconfirm: bool = False,
        *,
        reinstall: bool = False,
        dry_run: bool = False,
    ) -> InstallReport:
        """Install every package named in ``specs``.

        Args:
            specs: Package names, optionally prefixed with a source
                ('aur/yay', 'extra/firefox', 'flatpak/spotify').
            noconfirm: Pass ``--noconfirm`` to pacman and build AUR packages
                without showing them to the reviewer.
            reinstall: Build AUR packages even if they are already installed
                (used for upgrades).
            dry_run: Resolve everything but only record the plan.

        Returns:
            InstallReport describing what happened to each name.

        Raises:
            DependencyCycleError: If the AUR packages form a dependency cycle.
            InstallCancelledError: If the user interrupts an app-store install.
        """
        report = InstallReport()
        chosen = await self._choose_candidates(specs, report)

        repo_names = self._pending_repo(
            [c.package for c in chosen if isinstance(c.package, RepoPackage)], report
        )
        aur_roots = self._pending_aur(
            [c.package for c in chosen if isinstance(c.package, PackageRecord)],
            report,
            reinstall=reinstall,
        )
        store_pkgs = [
            c for c in chosen if c.source in (PackageSource.FLATPAK, PackageSource.SNAP)
        ]
        order = await self._ctx.resolver.resolve(aur_roots) if aur_roots else []

        if dry_run:
            report.planned.extend(f"repo/{name}" for name in repo_names)
            report.planned.extend(f"aur/{record.name}" for record in order)
            report.planned.extend(f"{c.source.value}/{c.install_id}" for c in store_pkgs)
            return report

        self._install_repo(repo_names, noconfirm, report)
        if order:
            dirs = await self._fetch_all(order, report)
            if not noconfirm and self._reviewer is not None:
                dirs = self._review_all(self._reviewer, order[: len(dirs)], dirs, report)
            self._build_all(order[: len(dirs)], dirs, report)
        self._install_app_store(store_pkgs, report)
        return report

    async def _choose_candidates(
        self, specs: list[str], report: InstallReport
    ) -> list[PackageCandidate]:
        chosen: list[PackageCandidate] = []
        for spec in specs:
            name, flags = parse_package_spec(spec)
            candidates = await self._ctx.aggregator.find_sources_cached(name, flags)
            if not candidates:
                report.failed.append((name, "not found in any source"))
                continue

            if len(candidates) == 1 or flags is not None:
                candidate: PackageCandidate | None = candidates[0]
            else:
                candidate = self._chooser(name, candidates)

            if candidate is None:
                logger.info("No source selected for %s, skipping", name)
                report.skipped.append(name)
                continue
            chosen.append(candidate)
        return chosen

    @staticmethod
    def _pending_repo(packages: list[RepoPackage], report: InstallReport) -> list[str]:
        pending: list[str] = []
        for pkg in packages:
            if pkg.installed:
                report.skipped.append(pkg.name)
            else:
                pending.append(pkg.name)
        return pending

    def _pending_aur(
        self, records: list[PackageRecord], report: InstallReport, *, reinstall: bool
    ) -> list[PackageRecord]:
        roots: list[PackageRecord] = []
        for record in records:
            if not reinstall and self._ctx.repo.is_installed(record.name):
                report.skipped.append(record.name)
            else:
                roots.append(record)
        return roots

    def _install_repo(self, names: list[str], noconfirm: bool, report: InstallReport) -> None:
        if not names:
            return
        extra_args = ["--noconfirm"] if noconfirm else []
        for result in self._ctx.repo.install(names, extra_args):
            if result.success:
                report.installed.append(result.action.package)
            else:
                report.failed.append((result.action.package, result.error or "install failed"))

    async def _fetch_all(self, order: list[PackageRecord], report: InstallReport) -> list[Path]:
        """Fetch build trees in order, stopping at the first failure.

        Everything after a failed package is reported failed too, since it
        may depend on it.
        """
        fetcher = self._ctx.fetcher
        by_base: dict[str, Path] = {}
        dirs: list[Path] = []
        for index, record in enumerate(order):
            base = record.package_base or record.name
            if base not in by_base:
                try:
                    by_base[base] = await fetcher.acquire(base)
                except DownloadFailedError as e:
                    report.failed.append((record.name, str(e)))
                    self._fail_remaining(order[index + 1 :], record.name, report)
                    break
            dirs.append(by_base[base])
        return dirs

    @staticmethod
    def _review_all(
        reviewer: PkgbuildReviewer,
        order: list[PackageRecord],
        dirs: list[Path],
        report: InstallReport,
    ) -> list[Path]:
        """Let the reviewer inspect each build tree before anything is built.

        The first declined package and everything after it are skipped.

        Returns:
            Directories of the packages that may be built, in order.
        """
        reviewed: set[Path] = set()
        for index, (record, pkg_dir) in enumerate(zip(order, dirs, strict=True)):
            if pkg_dir in reviewed:
                continue
            if not reviewer(record.name, pkg_dir):
                logger.info("Build of %s declined", record.name)
                report.skipped.extend(r.name for r in order[index:])
                return dirs[:index]
            reviewed.add(pkg_dir)
        return dirs

    def _build_all(
        self, order: list[PackageRecord], dirs: list[Path], report: InstallReport
    ) -> None:
        builder = self._ctx.builder
        remove_make_deps = self._ctx.config.remove_make_deps
        built: set[Path] = set()
        for index, (record, pkg_dir) in enumerate(zip(order, dirs, strict=True)):
            if pkg_dir in built:
                # Split package, installed together with its base
                report.installed.append(record.name)
                continue
            try:
                builder.build_and_install_with_cleanup(pkg_dir, True, record, remove_make_deps)
            except BuildFailedError as e:
                report.failed.append((record.name, str(e)))
                self._fail_remaining(order[index + 1 :], record.name, report)
                return
            built.add(pkg_dir)
            report.installed.append(record.name)

    @staticmethod
    def _fail_remaining(
        records: list[PackageRecord], culprit: str, report: InstallReport
    ) -> None:
        for record in records:
            report.failed.append((record.name, f"not built because {culprit} failed"))

    def _install_app_store(self, candidates: list[PackageCandidate], report: InstallReport) -> None:
        for candidate in candidates:
            label = candidate.source.label
            backend = self._ctx.app_store(candidate.source)
            if backend is None:
                report.failed.append((candidate.name, f"{label} is not configured"))
                continue
            if not backend.is_available():
                report.failed.append((candidate.name, f"{label} is not available"))
                continue
            if backend.is_installed(candidate.install_id):
                report.skipped.append(candidate.install_id)
                continue

            result = backend.install(candidate.install_id)
            if result.success:
                report.installed.append(candidate.install_id)
            else:
                report.failed.append((candidate.install_id, result.error or "install failed"))
