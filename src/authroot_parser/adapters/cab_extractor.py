"""
Cabinet adapter — unwrap authrootstl.cab down to the DER-encoded authroot.stl.

Adapter layer — implements the DerExtractor port using cabarchive, which
handles the Microsoft Cabinet container and its MSZIP compression.

Member selection:
  1. the configured member name (case-insensitive), default "authroot.stl"
  2. otherwise the only member, if the cabinet holds exactly one file
  3. otherwise NOT_FOUND, listing what the cabinet does contain
"""

from __future__ import annotations

import structlog
from cabarchive import CabArchive
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()

AUTHROOT_MEMBER = "authroot.stl"


class CabDerExtractor:
    """Extract one member from a Microsoft Cabinet. Implements the DerExtractor port."""

    def __init__(self, member: str = AUTHROOT_MEMBER) -> None:
        self._member = member

    def extract_der(self, archive: bytes) -> Result[bytes]:
        return Result.from_computation(
            lambda: CabArchive(archive),
            ErrorCode.DECODE_ERROR,
            "malformed cabinet archive",
        ).flat_map(self._select_member)

    def _select_member(self, cabinet: CabArchive) -> Result[bytes]:
        names = sorted(cabinet.keys())
        wanted = self._member.lower()
        matches = [name for name in names if name.lower() == wanted]
        if not matches and len(names) == 1:
            matches = names
        if not matches:
            return Result.failure(
                ErrorCode.NOT_FOUND,
                f"{self._member} not found in cabinet (members: {', '.join(names) or 'none'})",
            )

        name = matches[0]
        data = bytes(cabinet[name].buf or b"")
        log.info("cab.extracted", member=name, size_bytes=len(data))
        return Result.success(data)


class PassthroughDerExtractor:
    """For input that is already authroot.stl: hand the bytes through unchanged."""

    def extract_der(self, archive: bytes) -> Result[bytes]:
        return Result.success(archive)
