"""
Streaming tar archives of host files.
"""

import glob
import os
import tarfile
from collections.abc import Sequence
from typing import BinaryIO, Protocol

from .logging_config import get_logger

logger = get_logger(__name__)


class HostArchiver(Protocol):
    def get(
        self,
        root: str,
        directory: str,
        globs: Sequence[str],
        writer: BinaryIO,
        keep_directory_names: bool = False,
    ) -> None: ...


class TarArchiver:
    """Writes an uncompressed tar stream of the host paths matching a set of globs."""

    def get(
        self,
        root: str,
        directory: str,
        globs: Sequence[str],
        writer: BinaryIO,
        keep_directory_names: bool = False,
    ) -> None:
        """Stream matching paths to ``writer``.

        Args:
            root: Directory that member names are relative to
            directory: Sub-directory of ``root`` that relative globs resolve under
            globs: Path patterns to include
            writer: Binary stream receiving the archive
            keep_directory_names: Name members by their path under ``root``
                instead of their base name

        Raises:
            FileNotFoundError: If a glob matches nothing
        """
        base = os.path.join(root, directory)
        with tarfile.open(fileobj=writer, mode="w|") as tar:
            for pattern in globs:
                full_pattern = pattern if os.path.isabs(pattern) else os.path.join(base, pattern)
                matches = sorted(glob.glob(full_pattern))
                if not matches:
                    raise FileNotFoundError(f"no such file or directory: {pattern}")

                for path in matches:
                    if keep_directory_names:
                        arcname = os.path.relpath(path, root)
                    else:
                        arcname = os.path.basename(path)
                    tar.add(path, arcname=arcname)
                    logger.debug(f"Archived {path} as {arcname}")
