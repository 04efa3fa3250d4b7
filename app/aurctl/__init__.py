"""aurctl - build and install packages from the Arch User Repository.

Finds packages across pacman repositories, the AUR, Flatpak and Snap,
resolves AUR build order and drives makepkg.
"""

__version__ = "0.1.0"
