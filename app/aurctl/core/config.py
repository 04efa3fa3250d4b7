"""Configuration model and persistence.

Configuration is stored in ~/.config/aurctl/config.toml. A missing file
means defaults; every key is optional.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aurctl.core.errors import ConfigError, ConfigParseError
from aurctl.core.paths import get_config_path, get_default_clone_dir

logger = logging.getLogger(__name__)


class AurctlConfig(BaseModel):
    """User configuration for aurctl.

    Attributes:
        clone_dir: Directory holding one build tree per AUR package.
        use_git_clone: Prefer git clone/fetch over snapshot tarballs.
        max_concurrent_requests: Maximum concurrent AUR RPC requests.
        request_delay_ms: Minimum delay between two AUR RPC requests.
        cache_ttl_seconds: Lifetime of cached search results.
        remove_make_deps: Remove make dependencies after a successful build.
        confirm: Let pacman ask for confirmation; false implies --noconfirm.
    """

    model_config = ConfigDict(extra="forbid")

    clone_dir: Annotated[
        Path,
        Field(
            default_factory=get_default_clone_dir,
            description="Directory for cloned PKGBUILD trees",
        ),
    ]
    use_git_clone: Annotated[
        bool,
        Field(description="Use git clone instead of snapshot tarballs"),
    ] = True
    max_concurrent_requests: Annotated[
        int,
        Field(ge=1, le=100, description="Concurrent AUR RPC requests (1-100)"),
    ] = 10
    request_delay_ms: Annotated[
        int,
        Field(ge=0, le=10_000, description="Delay between AUR RPC requests in ms"),
    ] = 100
    cache_ttl_seconds: Annotated[
        int,
        Field(ge=0, description="Search cache lifetime in seconds"),
    ] = 3600
    remove_make_deps: Annotated[
        bool,
        Field(description="Remove make dependencies after building"),
    ] = False
    confirm: Annotated[
        bool,
        Field(description="Let pacman prompt before installing"),
    ] = True


def load_config(path: Path | None = None) -> AurctlConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AurctlConfig. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or fails validation.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return AurctlConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    if "clone_dir" in data:
        data["clone_dir"] = Path(str(data["clone_dir"])).expanduser()

    try:
        return AurctlConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: AurctlConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file atomically.

    Args:
        config: The configuration to save.
        path: Destination. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
