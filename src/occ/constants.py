"""
Constants used throughout occ.
"""

# Application metadata
APP_NAME = "occ"

# Platforms
PLATFORM_MAC = "mac"
MAC_PRIVATE_TEMP_DIR = "/private/tmp"
MAC_AGENT_DIR_MARKER = "com.apple.launchd"

# Container image
CONTAINER_IMAGE_NAME = "localhost/ocm-container"
DEFAULT_IMAGE_TAG = "latest"
DEFAULT_CONTAINER_ENGINE = "podman"

# Container mount paths
CONTAINER_SSH_SOCKETS_PATH = "/root/.ssh/sockets"
CONTAINER_OCC_CONFIG_PATH = "/root/.config/occ"
CONTAINER_SSH_PATH = "/root/.ssh"
CONTAINER_MAC_AGENT_PATH = "/tmp/ssh"
CONTAINER_AGENT_SOCKET_PATH = "/tmp/ssh.sock"
CONTAINER_MAC_AGENT_SOCKET = "/tmp/ssh/Listeners"
CONTAINER_GCLOUD_PATH = "/root/.config/gcloud"
CONTAINER_AWS_PATH = "/root/.aws"
CONTAINER_OPS_UTILS_PATH = "/root/sop-utils"
CONTAINER_HOME = "/root"

# Host paths, relative to the user's home directory
GCLOUD_CONFIG_DIR = ".config/gcloud"
AWS_CONFIG_DIR = ".aws"
PAGERDUTY_TOKEN_FILE = ".config/pagerduty-cli/config.json"

# Mount options
MOUNT_READ_ONLY = "ro"
MOUNT_READ_WRITE = "rw"

# Console port relay
CONSOLE_PORT = "9999/tcp"
PORTMAP_TEMP_PREFIX = "occ_portmaps"
PORTMAP_FILE_NAME = "portmap"
PORTMAP_CONTAINER_DIR = "/tmp"
COPY_CHUNK_SIZE = 64 * 1024

# Configuration
CONFIG_DIR_NAME = ".config/occ"
CONFIG_FILE_NAME = "config.yaml"
ENV_PREFIX = "OCC"

# Logging
DEFAULT_LOG_LEVEL = "warn"
TRACE_LEVEL = 5
