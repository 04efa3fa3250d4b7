"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import pytest


@pytest.fixture
def mock_pacman_search_output() -> str:
    """Sample pacman -Ss output for testing."""
    return """extra/firefox 131.0-1 [installed]
    Fast, Private & Safe Web Browser
extra/firefox-developer-edition 132.0b5-1
    Developer Edition of the popular Firefox web browser
community/firefox-tridactyl 1.24.1-1 (firefox-addons)
    Vim, but in your browser"""


@pytest.fixture
def mock_pacman_info_output() -> str:
    """Sample pacman -Si output for testing."""
    return """Repository      : extra
Name            : vim
Version         : 9.1.0-1
Description     : Vi Improved, a highly configurable, improved version of the vi text editor
Architecture    : x86_64
Depends On      : vim-runtime=9.1.0-1  gpm  acl  glibc
                  libgcrypt  zlib
Install Reason  : Explicitly installed"""


@pytest.fixture
def mock_flatpak_search_output() -> str:
    """Sample flatpak search output for testing."""
    return """Name\tDescription\tApplication ID\tVersion\tBranch
Spotify\tOnline music streaming service\tcom.spotify.Client\t1.2.31\tstable
Spot\tListen to music on Spotify\tdev.alextren.Spot\t0.4.1\tstable
Firefox\tFast, Private & Safe Web Browser\torg.mozilla.firefox\t131.0\tstable"""


@pytest.fixture
def mock_snap_find_output() -> str:
    """Sample snap find output for testing."""
    return """Name              Version   Publisher     Notes  Summary
spotify           1.2.31    spotify**     -      Music for everyone
spotify-qt        v3.11     kraxarn       -      Lightweight Spotify client
broken"""
