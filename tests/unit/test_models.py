"""
Unit tests for domain models.

Verifies immutability and the key ID derivation of CT log keys.
"""

from __future__ import annotations

import base64
import dataclasses
import hashlib
from datetime import UTC, datetime

import pytest

from authroot_parser.domain.models import CtLogKey, TrustList


class TestTrustList:
    def test_defaults_to_no_logs(self) -> None:
        trust_list = TrustList(sequence_number=1, effective_date=datetime(2025, 1, 1, tzinfo=UTC))
        assert trust_list.logs == ()
        assert trust_list.log_list_version == ()
        assert not trust_list.has_ct_logs

    def test_is_frozen(self) -> None:
        trust_list = TrustList(sequence_number=1, effective_date=datetime(2025, 1, 1, tzinfo=UTC))
        with pytest.raises(dataclasses.FrozenInstanceError):
            trust_list.sequence_number = 2  # type: ignore[misc]

    def test_repr_omits_key_material(self) -> None:
        trust_list = TrustList(
            sequence_number=1,
            effective_date=datetime(2025, 1, 1, tzinfo=UTC),
            logs=(b"\x30\x03secret",),
        )
        assert "secret" not in repr(trust_list)


class TestCtLogKey:
    """
    GIVEN an SPKI blob
    WHEN its key ID is derived
    THEN it is the SHA-256 of the whole DER encoding.
    """

    def test_key_id_is_sha256_of_spki(self) -> None:
        spki = b"\x30\x05\x01\x02\x03\x04\x05"
        key = CtLogKey(spki)
        assert key.key_id == hashlib.sha256(spki).digest()
        assert key.key_id_hex == hashlib.sha256(spki).hexdigest()
        assert key.key_id_base64 == base64.b64encode(hashlib.sha256(spki).digest()).decode()

    def test_from_trust_list_keeps_order(self) -> None:
        trust_list = TrustList(
            sequence_number=1,
            effective_date=datetime(2025, 1, 1, tzinfo=UTC),
            logs=(b"\x30\x01\x02", b"\x30\x01\x01", b"\x30\x01\x02"),
        )
        keys = CtLogKey.from_trust_list(trust_list)
        assert [key.spki for key in keys] == list(trust_list.logs)
        assert keys[0].key_id == keys[2].key_id != keys[1].key_id
