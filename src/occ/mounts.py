"""
Mount assembly for the OCM container.

Mounts are built as a pure function of host probes and configuration, so
the same inputs always produce the same ordered list.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import LaunchConfig
from .constants import (
    AWS_CONFIG_DIR,
    CONTAINER_AGENT_SOCKET_PATH,
    CONTAINER_AWS_PATH,
    CONTAINER_GCLOUD_PATH,
    CONTAINER_HOME,
    CONTAINER_MAC_AGENT_PATH,
    CONTAINER_OCC_CONFIG_PATH,
    CONTAINER_OPS_UTILS_PATH,
    CONTAINER_SSH_PATH,
    CONTAINER_SSH_SOCKETS_PATH,
    GCLOUD_CONFIG_DIR,
    MAC_AGENT_DIR_MARKER,
    MOUNT_READ_ONLY,
    MOUNT_READ_WRITE,
    PAGERDUTY_TOKEN_FILE,
    PLATFORM_MAC,
)
from .errors import AgentNotFoundError
from .filesystem import FileSystemRead
from .logging_config import get_logger

logger = get_logger(__name__)


class MountKind(str, Enum):
    BIND = "bind"
    TMPFS = "tmpfs"


@dataclass(frozen=True)
class MountSpec:
    """A host path (or in-memory filesystem) exposed inside the container."""

    destination: str
    source: str = ""
    options: tuple[str, ...] = ()
    kind: MountKind = MountKind.BIND

    def __post_init__(self) -> None:
        if self.kind is MountKind.TMPFS and self.source:
            raise ValueError(f"tmpfs mount at {self.destination} cannot have a source")

    @property
    def read_only(self) -> bool:
        return MOUNT_READ_ONLY in self.options


def read_only_bind(source: str, destination: str) -> MountSpec:
    return MountSpec(destination=destination, source=source, options=(MOUNT_READ_ONLY,))


def locate_agent(fs: FileSystemRead, temp_dir: str) -> str:
    """Find the launchd SSH agent directory in the mac private temp directory.

    Entries are scanned in listing order and the first one whose name
    contains ``com.apple.launchd`` wins. When several agents are running
    the choice between them is arbitrary.

    Raises:
        AgentNotFoundError: If the directory is empty or nothing matches
        OSError: If the directory cannot be listed
    """
    entries = fs.read_dir(temp_dir)
    if not entries:
        raise AgentNotFoundError(f"no dirs found at {temp_dir}")

    for name in entries:
        if MAC_AGENT_DIR_MARKER in name:
            logger.debug(f"Found SSH agent directory {name} in {temp_dir}")
            return name

    raise AgentNotFoundError(f"no dir found at {temp_dir} containing {MAC_AGENT_DIR_MARKER}")


def google_cli_config_mounts(home_dir: str) -> list[MountSpec]:
    """Mount the gcloud CLI config read-only next to where gcloud expects it."""
    gcloud_dir = f"{home_dir}/{GCLOUD_CONFIG_DIR}"
    return [
        read_only_bind(f"{gcloud_dir}/active_config", f"{CONTAINER_GCLOUD_PATH}/active_config_readonly"),
        read_only_bind(
            f"{gcloud_dir}/configurations/config_default",
            f"{CONTAINER_GCLOUD_PATH}/configurations/config_default_readonly",
        ),
        read_only_bind(f"{gcloud_dir}/credentials.db", f"{CONTAINER_GCLOUD_PATH}/credentials_readonly.db"),
        read_only_bind(f"{gcloud_dir}/access_tokens.db", f"{CONTAINER_GCLOUD_PATH}/access_tokens_readonly.db"),
    ]


def aws_credentials_mounts(home_dir: str) -> list[MountSpec]:
    aws_dir = f"{home_dir}/{AWS_CONFIG_DIR}"
    return [
        read_only_bind(f"{aws_dir}/credentials", f"{CONTAINER_AWS_PATH}/credentials"),
        read_only_bind(f"{aws_dir}/config", f"{CONTAINER_AWS_PATH}/config"),
    ]


def ssh_agent_mount(
    fs: FileSystemRead,
    platform: str,
    temp_dir: str,
    ssh_auth_sock: Optional[str] = None,
) -> MountSpec:
    """Mount the host's SSH agent.

    On mac the whole launchd agent directory is mounted. Elsewhere the
    ``SSH_AUTH_SOCK`` socket is mounted as-is, even when it is unset.
    """
    if platform == PLATFORM_MAC:
        agent_dir = locate_agent(fs, temp_dir)
        return read_only_bind(f"{temp_dir}/{agent_dir}", CONTAINER_MAC_AGENT_PATH)

    if ssh_auth_sock is None:
        ssh_auth_sock = os.environ.get("SSH_AUTH_SOCK", "")
    if not ssh_auth_sock:
        logger.warning("SSH_AUTH_SOCK is not set, the SSH agent mount will be empty")
    return read_only_bind(ssh_auth_sock, CONTAINER_AGENT_SOCKET_PATH)


def build_mounts(
    fs: FileSystemRead,
    config: LaunchConfig,
    home_dir: str,
    temp_dir: str,
    platform: str,
    ssh_auth_sock: Optional[str] = None,
) -> list[MountSpec]:
    """Build the ordered list of mounts for a session.

    Args:
        fs: Host filesystem used for existence checks and the agent scan
        config: Resolved launch configuration, including the config file path
        home_dir: The user's home directory
        temp_dir: The mac private temp directory holding the SSH agent
        platform: Platform name, ``"mac"`` or anything else
        ssh_auth_sock: Agent socket for non-mac platforms, defaults to ``$SSH_AUTH_SOCK``

    Returns:
        Mount specs, unconditional mounts first
    """
    home_dir = str(home_dir)
    mounts = [
        MountSpec(destination=CONTAINER_SSH_SOCKETS_PATH, kind=MountKind.TMPFS),
        read_only_bind(config.config_path, CONTAINER_OCC_CONFIG_PATH),
        read_only_bind(f"{home_dir}/.ssh", CONTAINER_SSH_PATH),
        ssh_agent_mount(fs, platform, temp_dir, ssh_auth_sock),
    ]

    # Google Cloud CLI config
    if fs.exists(f"{home_dir}/{GCLOUD_CONFIG_DIR}"):
        mounts.extend(google_cli_config_mounts(home_dir))

    # AWS credentials
    if fs.exists(f"{home_dir}/{AWS_CONFIG_DIR}"):
        mounts.extend(aws_credentials_mounts(home_dir))

    if config.ops_utils_dir:
        option = MOUNT_READ_WRITE if config.ops_utils_dir_rw else MOUNT_READ_ONLY
        mounts.append(
            MountSpec(destination=CONTAINER_OPS_UTILS_PATH, source=config.ops_utils_dir, options=(option,))
        )

    pagerduty_token = f"{home_dir}/{PAGERDUTY_TOKEN_FILE}"
    if fs.exists(pagerduty_token):
        mounts.append(read_only_bind(pagerduty_token, f"{CONTAINER_HOME}/{PAGERDUTY_TOKEN_FILE}"))

    logger.debug(f"Prepared {len(mounts)} mount configurations")
    return mounts
