"""
Console port relay.

After the container starts, the host ports published for the console port
are written to a small file and copied into the container. The host side
archives the file into a pipe on a background thread while the calling
thread streams the other end of the pipe into the container.
"""

import os
import queue
import threading
from collections.abc import Callable
from typing import IO, Any, Optional

from .archive import HostArchiver
from .constants import (
    CONSOLE_PORT,
    PORTMAP_CONTAINER_DIR,
    PORTMAP_FILE_NAME,
    PORTMAP_TEMP_PREFIX,
    TRACE_LEVEL,
)
from .container_manager import ContainerRuntime
from .errors import (
    AggregatedRelayError,
    ArchiveReadError,
    CopyRequestError,
    CopyStreamError,
    FileCreateError,
    InspectFailedError,
    RelayError,
    TempDirError,
    WriteError,
)
from .filesystem import FileSystemWrite
from .logging_config import get_logger

logger = get_logger(__name__)


def published_host_ports(inspect_data: dict[str, Any], container_port: str = CONSOLE_PORT) -> list[str]:
    """Host ports bound to a container port, in the order the runtime reports them."""
    network = inspect_data.get("NetworkSettings") or {}
    bindings = (network.get("Ports") or {}).get(container_port) or []
    return [str(binding["HostPort"]) for binding in bindings]


def _close(stream: IO[bytes]) -> None:
    try:
        stream.close()
    except OSError as e:
        logger.debug(f"Error closing relay pipe: {e}")


def do_copy(host_copy: Callable[[], None], container_copy: Callable[[], None]) -> None:
    """Run both halves of a copy concurrently and collect their failures.

    ``host_copy`` runs on a background thread while ``container_copy`` runs
    on the calling thread. Neither side cancels the other.

    Raises:
        AggregatedRelayError: If either side failed; the container-side
            error comes first
    """
    results: "queue.Queue[Optional[Exception]]" = queue.Queue(maxsize=1)

    def run_host_copy() -> None:
        try:
            host_copy()
        except Exception as e:
            results.put(e)
        else:
            results.put(None)

    thread = threading.Thread(target=run_host_copy, name="occ-host-copy", daemon=True)
    thread.start()

    copy_errors: list[Exception] = []
    try:
        container_copy()
    except Exception as e:
        copy_errors.append(e)

    host_error = results.get()
    thread.join()
    if host_error is not None:
        copy_errors.append(host_error)

    if copy_errors:
        raise AggregatedRelayError(copy_errors)


def write_portmap(fs: FileSystemWrite, path: str, host_ports: list[str]) -> None:
    """Write one host port per line."""
    try:
        handle = fs.create(path)
    except OSError as e:
        raise FileCreateError(f"failed to create portmap file: {e}") from e

    with handle:
        for port in host_ports:
            try:
                fs.write_line(handle, port)
            except OSError as e:
                raise WriteError(f"failed to write host port to portmap file: {e}") from e


def copy_portmap(
    fs: FileSystemWrite,
    runtime: ContainerRuntime,
    archiver: HostArchiver,
    container_id: str,
) -> None:
    """Copy the console portmap file from the host into a running container.

    Raises:
        TempDirError, InspectFailedError, FileCreateError, WriteError:
            If preparing the portmap file fails
        RelayError: If copying the file into the container fails
    """
    try:
        tmpdir = fs.mkdtemp(PORTMAP_TEMP_PREFIX)
    except OSError as e:
        raise TempDirError(f"failed to create a tempdir for portmap: {e}") from e

    try:
        _copy_portmap(fs, runtime, archiver, container_id, tmpdir)
    finally:
        try:
            fs.remove_all(tmpdir)
        except OSError as e:
            logger.debug(f"Failed to remove portmap tempdir {tmpdir}: {e}")


def _copy_portmap(
    fs: FileSystemWrite,
    runtime: ContainerRuntime,
    archiver: HostArchiver,
    container_id: str,
    tmpdir: str,
) -> None:
    try:
        data = runtime.inspect(container_id)
    except Exception as e:
        raise InspectFailedError(f"failed to inspect container: {e}") from e

    host_ports = published_host_ports(data)
    logger.debug(f"Host ports for {CONSOLE_PORT}: {host_ports}")

    portmap_path = os.path.join(tmpdir, PORTMAP_FILE_NAME)
    write_portmap(fs, portmap_path, host_ports)

    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "rb")
    writer = os.fdopen(write_fd, "wb")

    def host_copy() -> None:
        try:
            archiver.get("/", "", [portmap_path], writer, keep_directory_names=True)
        except Exception as e:
            raise ArchiveReadError(f"error copying portmap file from host: {e}") from e
        finally:
            _close(writer)

    def container_copy() -> None:
        try:
            try:
                copy_func = runtime.copy_from_archive(container_id, PORTMAP_CONTAINER_DIR, reader)
            except Exception as e:
                raise CopyRequestError(
                    f"error requesting portmap copy into container at {PORTMAP_CONTAINER_DIR}: {e}"
                ) from e

            try:
                copy_func()
            except Exception as e:
                raise CopyStreamError(f"error copying portmap file to container: {e}") from e
        finally:
            _close(reader)

    try:
        do_copy(host_copy, container_copy)
    except AggregatedRelayError as e:
        raise RelayError(f"error copying portmap file from host to container: {e}") from e

    logger.log(TRACE_LEVEL, f"Copied portmap to {container_id[:12]}:{PORTMAP_CONTAINER_DIR}")
