"""Data models for aurctl.

This module exports the core data structures used throughout the application.
"""

from aurctl.models.action import Action, ActionResult, ActionType
from aurctl.models.aur import PackageRecord, RpcResponse
from aurctl.models.package import (
    FlatpakPackage,
    PackageCandidate,
    PackageSource,
    RepoPackage,
    SnapPackage,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionType",
    "FlatpakPackage",
    "PackageCandidate",
    "PackageRecord",
    "PackageSource",
    "RepoPackage",
    "RpcResponse",
    "SnapPackage",
]
