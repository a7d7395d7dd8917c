"""
In-memory stand-ins for the host filesystem, container runtime and archiver.
"""

import io
import posixpath
from collections.abc import Callable, Sequence
from typing import IO, Any, BinaryIO, Optional

from occ.mounts import MountSpec


class MemoryFileSystemRead:
    """Answers existence checks and listings from a set of known paths."""

    def __init__(self, paths: Sequence[str] = (), errors: Optional[dict[str, OSError]] = None) -> None:
        self.paths = set()
        for path in paths:
            # Every parent of a known path exists as a directory
            while path and path not in self.paths:
                self.paths.add(path)
                path = posixpath.dirname(path)
        self.errors = errors or {}

    def exists(self, path: str) -> bool:
        return path in self.paths

    def read_dir(self, path: str) -> list[str]:
        if path in self.errors:
            raise self.errors[path]
        if path not in self.paths:
            raise FileNotFoundError(f"open {path}: file does not exist")
        prefix = path.rstrip("/") + "/"
        return sorted(
            p[len(prefix):] for p in self.paths if p.startswith(prefix) and "/" not in p[len(prefix):]
        )


class _MemoryFile(io.StringIO):
    def __init__(self, files: dict[str, str], path: str) -> None:
        super().__init__()
        self._files = files
        self._path = path

    def close(self) -> None:
        if not self.closed:
            self._files[self._path] = self.getvalue()
        super().close()


class MemoryFileSystemWrite:
    """Keeps created files in a dict; ``fail_on`` names an operation that raises."""

    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.fail_on = fail_on
        self.files: dict[str, str] = {}
        self.temp_dirs: list[str] = []
        self.removed: list[str] = []

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise OSError("fail")

    def mkdtemp(self, prefix: str, dir: Optional[str] = None) -> str:
        self._maybe_fail("mkdtemp")
        path = f"/memory/{prefix}{len(self.temp_dirs)}"
        self.temp_dirs.append(path)
        return path

    def remove_all(self, path: str) -> None:
        self.removed.append(path)
        self._maybe_fail("remove_all")

    def create(self, path: str) -> IO[str]:
        self._maybe_fail("create")
        return _MemoryFile(self.files, path)

    def write_line(self, handle: IO[str], value: str) -> None:
        self._maybe_fail("write_line")
        handle.write(f"{value}\n")


def inspect_data(*host_ports: str) -> dict[str, Any]:
    return {
        "NetworkSettings": {
            "Ports": {"9999/tcp": [{"HostIp": "0.0.0.0", "HostPort": port} for port in host_ports]},
        },
    }


class FakeRuntime:
    """Records calls and drains copied archives into ``copied``."""

    def __init__(
        self,
        host_ports: Sequence[str] = ("12345",),
        inspect_error: Optional[Exception] = None,
        copy_request_error: Optional[Exception] = None,
        copy_stream_error: Optional[Exception] = None,
    ) -> None:
        self.host_ports = list(host_ports)
        self.inspect_error = inspect_error
        self.copy_request_error = copy_request_error
        self.copy_stream_error = copy_stream_error
        self.calls: list[str] = []
        self.created: dict[str, Any] = {}
        self.copied: dict[str, bytes] = {}

    def create_container(
        self,
        image: str,
        environment: dict[str, str],
        mounts: Sequence[MountSpec],
        publish_ports: bool,
    ) -> str:
        self.calls.append("create")
        self.created = {
            "image": image,
            "environment": environment,
            "mounts": list(mounts),
            "publish_ports": publish_ports,
        }
        return "abc123def456789"

    def start_container(self, container_id: str) -> None:
        self.calls.append("start")

    def attach_to_container(self, container_id: str) -> None:
        self.calls.append("attach")

    def inspect(self, container_id: str) -> dict[str, Any]:
        self.calls.append("inspect")
        if self.inspect_error:
            raise self.inspect_error
        return inspect_data(*self.host_ports)

    def copy_from_archive(self, container_id: str, path: str, reader: IO[bytes]) -> Callable[[], None]:
        self.calls.append("copy_request")
        if self.copy_request_error:
            raise self.copy_request_error

        def copy() -> None:
            self.calls.append("copy_stream")
            self.copied[path] = reader.read()
            if self.copy_stream_error:
                raise self.copy_stream_error

        return copy


class FakeArchiver:
    """Writes fixed bytes, or raises ``error``."""

    def __init__(self, payload: bytes = b"", error: Optional[Exception] = None) -> None:
        self.payload = payload
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def get(
        self,
        root: str,
        directory: str,
        globs: Sequence[str],
        writer: BinaryIO,
        keep_directory_names: bool = False,
    ) -> None:
        self.requests.append(
            {"root": root, "directory": directory, "globs": list(globs), "keep": keep_directory_names}
        )
        if self.error:
            raise self.error
        writer.write(self.payload)
