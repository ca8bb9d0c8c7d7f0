"""
Ports — Protocol-based interfaces for infrastructure adapters.

These define WHAT the application needs (contracts) without specifying
HOW it's done (implementation). Following hexagonal architecture:

  Domain ← Ports (protocols) ← Adapters (implementations)

Each port is a Protocol (structural typing) so adapters satisfy
the contract simply by implementing the methods — no inheritance.

Flow:
  1. ArchiveSource     → raw archive bytes (HTTP download or local file)
  2. DerExtractor      → authroot.stl DER bytes (cabinet unpacking)
  3. TrustListDecoder  → TrustList (PKCS#7 → CTL → CT-log extension)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from railway.result import Result

from authroot_parser.domain.models import TrustList


@runtime_checkable
class ArchiveSource(Protocol):
    """
    Port: obtain the raw archive that wraps authroot.stl.

    The HTTP implementation applies an explicit deadline; a timeout is
    reported as a failure, never as a partial payload.
    """

    def fetch(self) -> Result[bytes]: ...


@runtime_checkable
class DerExtractor(Protocol):
    """Port: unwrap the archive container down to the DER-encoded authroot.stl."""

    def extract_der(self, archive: bytes) -> Result[bytes]: ...


@runtime_checkable
class TrustListDecoder(Protocol):
    """
    Port: decode DER-encoded authroot.stl into a TrustList.

    Pure and reentrant: the same buffer may be decoded from several threads.
    The first malformed field fails the whole decode; there is no partial
    result.
    """

    def decode(self, der: bytes) -> Result[TrustList]: ...
