"""XDG-compliant path management for aurctl.

XDG defaults:
- Config: ~/.config/aurctl/
- Cache: ~/.cache/aurctl/ (search cache, cloned PKGBUILD trees)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "aurctl"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/aurctl/ (or XDG_CONFIG_HOME/aurctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_cache_dir() -> Path:
    """Get the cache directory path.

    Returns:
        Path to ~/.cache/aurctl/ (or XDG_CACHE_HOME/aurctl/).
    """
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/aurctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_default_clone_dir() -> Path:
    """Get the default directory holding one build tree per AUR package.

    Returns:
        Path to ~/.cache/aurctl/clone.
    """
    return get_cache_dir() / "clone"


def get_search_cache_path() -> Path:
    """Get the search result cache file path.

    Returns:
        Path to ~/.cache/aurctl/search_cache.json.
    """
    return get_cache_dir() / "search_cache.json"
