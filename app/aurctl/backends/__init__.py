"""Package backends consulted alongside the AUR.

This module exports the pacman repository backend and the two app-store
backends (Flatpak, Snap).
"""

from aurctl.backends.base import AppStoreBackend, Backend
from aurctl.backends.flatpak import FlatpakBackend
from aurctl.backends.pacman import PacmanBackend
from aurctl.backends.snap import SnapBackend

__all__ = ["AppStoreBackend", "Backend", "FlatpakBackend", "PacmanBackend", "SnapBackend"]
