"""
Environment variables passed into the OCM container.
"""

from collections.abc import Sequence

from .config import LaunchConfig
from .constants import CONTAINER_AGENT_SOCKET_PATH, CONTAINER_MAC_AGENT_SOCKET, PLATFORM_MAC


def build_env(config: LaunchConfig, args: Sequence[str], platform: str) -> dict[str, str]:
    """Build the container environment for a launch.

    Only non-empty settings are passed through. ``SSH_AUTH_SOCK`` always
    points at where ``build_mounts`` places the agent for the platform.
    """
    env: dict[str, str] = {}

    if config.user:
        env["USER"] = config.user

    if config.offline_access_token:
        env["OFFLINE_ACCESS_TOKEN"] = config.offline_access_token

    if config.ocm_url:
        env["OCM_URL"] = config.ocm_url

    if len(args) > 0:
        env["INITIAL_CLUSTER_LOGIN"] = args[0]

    if platform == PLATFORM_MAC:
        env["SSH_AUTH_SOCK"] = CONTAINER_MAC_AGENT_SOCKET
    else:
        env["SSH_AUTH_SOCK"] = CONTAINER_AGENT_SOCKET_PATH

    return env
