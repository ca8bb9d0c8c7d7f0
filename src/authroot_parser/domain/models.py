"""
Domain models — immutable values decoded from Microsoft's authroot.stl.

TrustList is what the decoder returns: the list-level header fields of the
Certificate Trust List plus the contents of its CT-log extension. It holds
owned byte copies only, never views into the input buffer.

CtLogKey is the consumer-side view of one log entry: the raw
SubjectPublicKeyInfo and the log ID derived from it (SHA-256 of the DER).

All models are frozen dataclasses (immutable).
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from datetime import datetime

from cryptography.hazmat.primitives import hashes


@dataclass(frozen=True, slots=True)
class TrustList:
    """
    Decoded authroot.stl trust list.

    `sequence_number` is the publisher's monotonically increasing version
    stamp and may exceed 64 bits. `log_list_version` and `logs` are empty
    when the CTL carries no CT-log extension. `logs` keeps the order of the
    input and is not deduplicated; each entry is a complete SPKI SEQUENCE.
    """

    sequence_number: int
    effective_date: datetime
    log_list_version: tuple[int, ...] = ()
    logs: tuple[bytes, ...] = field(default=(), repr=False)

    @property
    def has_ct_logs(self) -> bool:
        return bool(self.logs)


@dataclass(frozen=True, slots=True)
class CtLogKey:
    """One CT log public key, identified by the SHA-256 of its SPKI."""

    spki: bytes = field(repr=False)

    @property
    def key_id(self) -> bytes:
        digest = hashes.Hash(hashes.SHA256())
        digest.update(self.spki)
        return digest.finalize()

    @property
    def key_id_base64(self) -> str:
        return base64.b64encode(self.key_id).decode("ascii")

    @property
    def key_id_hex(self) -> str:
        return self.key_id.hex()

    @classmethod
    def from_trust_list(cls, trust_list: TrustList) -> list[CtLogKey]:
        return [cls(spki=spki) for spki in trust_list.logs]
