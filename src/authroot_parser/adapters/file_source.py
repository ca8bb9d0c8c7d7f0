"""
File adapter — read a previously downloaded archive or authroot.stl from disk.

Implements the ArchiveSource port so the pipeline runs unchanged whether
the input comes from the CDN or from a local copy.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()


class FileArchiveSource:
    """Read raw bytes from a local path. Implements the ArchiveSource port."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def fetch(self) -> Result[bytes]:
        """Returns Result.failure(NOT_FOUND, ...) if the file cannot be read."""
        return Result.from_computation(
            lambda: self._path.read_bytes(),
            ErrorCode.NOT_FOUND,
            f"cannot read {self._path}",
        ).peek(lambda data: log.info("file.loaded", path=str(self._path), size_bytes=len(data)))
