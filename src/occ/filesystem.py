"""
Host filesystem access behind small read and write interfaces.

The launcher and relay only touch the host through these, so tests can
substitute in-memory versions.
"""

import os
import shutil
import tempfile
from typing import IO, Optional, Protocol

from .errors import ProbeError
from .logging_config import get_logger

logger = get_logger(__name__)


class FileSystemRead(Protocol):
    def exists(self, path: str) -> bool: ...

    def read_dir(self, path: str) -> list[str]: ...


class FileSystemWrite(Protocol):
    def mkdtemp(self, prefix: str, dir: Optional[str] = None) -> str: ...

    def remove_all(self, path: str) -> None: ...

    def create(self, path: str) -> IO[str]: ...

    def write_line(self, handle: IO[str], value: str) -> None: ...


class OsFileSystemRead:
    """Read access backed by the operating system."""

    def exists(self, path: str) -> bool:
        """Check whether a path exists.

        A missing path is a normal negative result; any other failure
        (permissions, I/O) raises ``ProbeError``.
        """
        try:
            os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as e:
            raise ProbeError(f"failed to check {path}: {e}") from e
        return True

    def read_dir(self, path: str) -> list[str]:
        """List entry names directly under a directory, sorted by name."""
        return sorted(os.listdir(path))


class OsFileSystemWrite:
    """Write access backed by the operating system."""

    def mkdtemp(self, prefix: str, dir: Optional[str] = None) -> str:
        return tempfile.mkdtemp(prefix=prefix, dir=dir)

    def remove_all(self, path: str) -> None:
        if os.path.isdir(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.remove(path)
        logger.debug(f"Removed {path}")

    def create(self, path: str) -> IO[str]:
        return open(path, "w")

    def write_line(self, handle: IO[str], value: str) -> None:
        handle.write(f"{value}\n")
