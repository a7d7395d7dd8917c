"""
Container runtime access for occ.
"""

import subprocess
from collections.abc import Callable, Iterator, Sequence
from typing import IO, TYPE_CHECKING, Any, Protocol

import docker
from docker.errors import APIError, DockerException, NotFound
from docker.types import Mount

from .constants import COPY_CHUNK_SIZE, DEFAULT_CONTAINER_ENGINE, TRACE_LEVEL
from .errors import ContainerError, RuntimeConnectionError
from .logging_config import get_logger

if TYPE_CHECKING:
    from .mounts import MountSpec

logger = get_logger(__name__)


class ContainerRuntime(Protocol):
    def create_container(
        self,
        image: str,
        environment: dict[str, str],
        mounts: Sequence["MountSpec"],
        publish_ports: bool,
    ) -> str: ...

    def start_container(self, container_id: str) -> None: ...

    def attach_to_container(self, container_id: str) -> None: ...

    def inspect(self, container_id: str) -> dict[str, Any]: ...

    def copy_from_archive(self, container_id: str, path: str, reader: IO[bytes]) -> Callable[[], None]: ...


def to_docker_mount(spec: "MountSpec") -> Mount:
    """Convert a mount spec to the docker SDK's mount type."""
    return Mount(
        target=spec.destination,
        source=spec.source or None,
        type=spec.kind.value,
        read_only=spec.read_only,
    )


def _read_chunks(reader: IO[bytes]) -> Iterator[bytes]:
    while True:
        chunk = reader.read(COPY_CHUNK_SIZE)
        if not chunk:
            return
        yield chunk


class ContainerManager:
    """Manages the OCM container through a Docker-compatible API socket."""

    def __init__(self, base_url: str, engine: str = DEFAULT_CONTAINER_ENGINE) -> None:
        """Connect to the container runtime.

        Args:
            base_url: Runtime API socket, e.g. ``unix:///run/podman/podman.sock``
            engine: CLI used for attaching to the container TTY
        """
        self.engine = engine
        try:
            logger.log(TRACE_LEVEL, f"Using podman socket at: {base_url}")
            self.client = docker.DockerClient(base_url=base_url)
            # Test connection
            self.client.ping()
            logger.debug("Container runtime client initialized successfully")
        except DockerException as e:
            logger.debug(f"Cannot connect to container runtime: {e}")
            raise RuntimeConnectionError(
                f"Error building connection to the container runtime at {base_url}: {e}"
            ) from e

    def create_container(
        self,
        image: str,
        environment: dict[str, str],
        mounts: Sequence["MountSpec"],
        publish_ports: bool,
    ) -> str:
        """Create the session container and return its ID."""
        try:
            container = self.client.containers.create(
                image=image,
                stdin_open=True,
                tty=True,
                privileged=True,
                auto_remove=True,
                environment=environment,
                mounts=[to_docker_mount(spec) for spec in mounts],
                publish_all_ports=publish_ports,
            )
        except (APIError, DockerException) as e:
            logger.debug(f"Failed to create container from {image}: {e}")
            raise ContainerError(f"Failed to create container: {e}") from e

        logger.info(f"Created container {container.id[:12]} from {image}")
        return str(container.id)

    def start_container(self, container_id: str) -> None:
        try:
            container = self.client.containers.get(container_id)
            container.start()
        except NotFound as e:
            raise ContainerError(f"Container not found: {container_id[:12]} - {e}") from e
        except APIError as e:
            raise ContainerError(f"Failed to start container {container_id[:12]}: {e}") from e

        logger.info(f"Started container {container_id[:12]}")

    def attach_to_container(self, container_id: str) -> None:
        """Attach the terminal to the running container."""
        # Use subprocess for proper TTY handling
        try:
            result = subprocess.run([self.engine, "attach", container_id], check=False)
        except (subprocess.SubprocessError, FileNotFoundError) as e:
            raise ContainerError(f"There was an error attaching to the container: {e}") from e

        logger.debug(f"Detached from container {container_id[:12]} with exit code {result.returncode}")

    def inspect(self, container_id: str) -> dict[str, Any]:
        """Return the runtime's inspection data for a container."""
        container = self.client.containers.get(container_id)
        container.reload()
        attrs: dict[str, Any] = container.attrs
        return attrs

    def copy_from_archive(self, container_id: str, path: str, reader: IO[bytes]) -> Callable[[], None]:
        """Prepare a copy of a tar stream into a container directory.

        The container is resolved now; the returned callable streams
        ``reader`` to the runtime when invoked.
        """
        container = self.client.containers.get(container_id)

        def copy() -> None:
            if not container.put_archive(path, _read_chunks(reader)):
                raise ContainerError(f"Runtime rejected archive for {container_id[:12]}:{path}")
            logger.debug(f"Copied archive to container {container_id[:12]}:{path}")

        return copy
