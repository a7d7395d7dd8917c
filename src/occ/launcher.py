"""
Session launch for the OCM container.
"""

from pathlib import Path
from typing import Optional

from .archive import HostArchiver, TarArchiver
from .config import LaunchConfig
from .constants import MAC_PRIVATE_TEMP_DIR
from .container_manager import ContainerRuntime
from .environment import build_env
from .errors import ConfigError
from .filesystem import FileSystemRead, FileSystemWrite, OsFileSystemRead, OsFileSystemWrite
from .logging_config import get_logger
from .mounts import build_mounts
from .relay import copy_portmap
from .utils import current_platform, image_reference

logger = get_logger(__name__)


class SessionLauncher:
    """Creates, starts and attaches to an OCM container session."""

    def __init__(
        self,
        runtime: ContainerRuntime,
        fs_read: Optional[FileSystemRead] = None,
        fs_write: Optional[FileSystemWrite] = None,
        archiver: Optional[HostArchiver] = None,
        platform: Optional[str] = None,
        home_dir: Optional[Path] = None,
        temp_dir: str = MAC_PRIVATE_TEMP_DIR,
        ssh_auth_sock: Optional[str] = None,
    ) -> None:
        self.runtime = runtime
        self.fs_read = fs_read or OsFileSystemRead()
        self.fs_write = fs_write or OsFileSystemWrite()
        self.archiver = archiver or TarArchiver()
        self.platform = platform or current_platform()
        self.home_dir = str(home_dir or Path.home())
        self.temp_dir = temp_dir
        self.ssh_auth_sock = ssh_auth_sock

    def launch(self, config: LaunchConfig, tag: Optional[str] = None, publish_console_port: bool = True) -> str:
        """Run one session.

        Returns:
            The ID of the container that was launched

        Raises:
            OccError: On the first failure; nothing is retried
        """
        if not self.fs_read.exists(config.config_path):
            raise ConfigError(f"Cannot find config file at {config.config_path}. Run occ init to create one.")

        environment = build_env(config, config.args, self.platform)
        mounts = build_mounts(
            self.fs_read,
            config,
            self.home_dir,
            self.temp_dir,
            self.platform,
            ssh_auth_sock=self.ssh_auth_sock,
        )

        image = image_reference(tag)
        container_id = self.runtime.create_container(
            image=image,
            environment=environment,
            mounts=mounts,
            publish_ports=publish_console_port,
        )
        self.runtime.start_container(container_id)

        if publish_console_port:
            copy_portmap(self.fs_write, self.runtime, self.archiver, container_id)
        else:
            logger.debug("Console port mapping disabled, skipping portmap copy")

        self.runtime.attach_to_container(container_id)
        return container_id
