"""
Configuration loading for occ.

Settings are resolved from built-in defaults, the YAML config file and
``OCC_*`` environment variables, in that order of precedence.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONTAINER_ENGINE,
    DEFAULT_IMAGE_TAG,
    ENV_PREFIX,
    PLATFORM_MAC,
)
from .errors import ConfigError
from .logging_config import get_logger
from .utils import current_platform, parse_bool

logger = get_logger(__name__)

# Configuration keys
OCM_USER_KEY = "ocm-user"
OFFLINE_ACCESS_TOKEN_KEY = "offline-access-token"
OCM_URL_KEY = "ocm-url"
OPS_UTILS_DIR_KEY = "ops-utils-dir"
OPS_UTILS_DIR_RW_KEY = "ops-utils-dir-rw"
PODMAN_SOCKET_KEY = "podman-socket"
IMAGE_TAG_KEY = "container-image-tag"
DISABLE_CONSOLE_PORT_KEY = "disable-console-port"
CONTAINER_ENGINE_KEY = "container-engine"

KNOWN_KEYS = [
    OCM_USER_KEY,
    OFFLINE_ACCESS_TOKEN_KEY,
    OCM_URL_KEY,
    OPS_UTILS_DIR_KEY,
    OPS_UTILS_DIR_RW_KEY,
    PODMAN_SOCKET_KEY,
    IMAGE_TAG_KEY,
    DISABLE_CONSOLE_PORT_KEY,
    CONTAINER_ENGINE_KEY,
]

BOOL_KEYS = [OPS_UTILS_DIR_RW_KEY, DISABLE_CONSOLE_PORT_KEY]


def default_config_dir(home_dir: Optional[Path] = None) -> Path:
    """Directory holding the config file, ``~/.config/occ``.

    The same location is used on linux and mac.
    """
    return (home_dir or Path.home()) / CONFIG_DIR_NAME


def default_config_file(home_dir: Optional[Path] = None) -> Path:
    return default_config_dir(home_dir) / CONFIG_FILE_NAME


def env_var_name(key: str) -> str:
    """Environment variable overriding a key, e.g. ``ocm-user`` -> ``OCC_OCM_USER``."""
    return f"{ENV_PREFIX}_{key.upper().replace('-', '_')}"


def default_settings(platform: Optional[str] = None, home_dir: Optional[Path] = None) -> dict[str, Any]:
    """Defaults for settings that are not always given in the config file."""
    platform = platform or current_platform()
    home_dir = home_dir or Path.home()

    defaults: dict[str, Any] = {
        IMAGE_TAG_KEY: DEFAULT_IMAGE_TAG,
        DISABLE_CONSOLE_PORT_KEY: False,
        OPS_UTILS_DIR_RW_KEY: False,
        CONTAINER_ENGINE_KEY: DEFAULT_CONTAINER_ENGINE,
    }

    if platform == PLATFORM_MAC:
        # Assumes the default podman machine
        defaults[PODMAN_SOCKET_KEY] = (
            f"unix://{home_dir}/.local/share/containers/podman/machine/"
            "podman-machine-default/podman.sock"
        )
    else:
        defaults[PODMAN_SOCKET_KEY] = "unix:///run/podman/podman.sock"

    return defaults


def read_config_file(config_file: Path) -> dict[str, Any]:
    """Read the YAML config file.

    A missing file is treated as empty.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    if not config_file.exists():
        logger.debug(f"No config file at {config_file}")
        return {}

    try:
        with open(config_file) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config file {config_file}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_file} must contain a mapping of settings")

    logger.debug(f"Config read in from: {config_file}")
    return data


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home_dir: Optional[Path] = None,
) -> dict[str, Any]:
    """Resolve settings from defaults, the config file and the environment."""
    config_file = config_file or default_config_file(home_dir)
    environ = os.environ if environ is None else environ

    settings = default_settings(platform, home_dir)
    settings.update(read_config_file(config_file))

    for key in KNOWN_KEYS:
        value = environ.get(env_var_name(key))
        if value is not None:
            settings[key] = value

    for key in BOOL_KEYS:
        settings[key] = parse_bool(settings.get(key))

    return settings


def save_config(config_file: Path, settings: Mapping[str, Any]) -> None:
    """Write settings to the YAML config file, creating its directory."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.safe_dump(dict(settings), f, default_flow_style=False, sort_keys=True)
    logger.info(f"Config written to {config_file}")


def _string(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class LaunchConfig:
    """Resolved configuration for a single launch."""

    config_path: str
    user: str = ""
    offline_access_token: str = ""
    ocm_url: str = ""
    ops_utils_dir: str = ""
    ops_utils_dir_rw: bool = False
    cluster_id: Optional[str] = None

    @property
    def args(self) -> list[str]:
        """Positional command-line arguments given for this launch."""
        return [self.cluster_id] if self.cluster_id is not None else []

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, Any],
        config_path: Path,
        cluster_id: Optional[str] = None,
    ) -> "LaunchConfig":
        return cls(
            config_path=str(config_path),
            user=_string(settings.get(OCM_USER_KEY)),
            offline_access_token=_string(settings.get(OFFLINE_ACCESS_TOKEN_KEY)),
            ocm_url=_string(settings.get(OCM_URL_KEY)),
            ops_utils_dir=_string(settings.get(OPS_UTILS_DIR_KEY)),
            ops_utils_dir_rw=parse_bool(settings.get(OPS_UTILS_DIR_RW_KEY)),
            cluster_id=cluster_id,
        )
