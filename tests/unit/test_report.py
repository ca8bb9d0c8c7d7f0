"""Unit tests for console rendering of a decoded trust list."""

from __future__ import annotations

import base64
import hashlib
from datetime import UTC, datetime

from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from authroot_parser.domain.models import TrustList
from authroot_parser.report import describe_public_key, render_trust_list
from tests.der_builder import opaque_sequence
from tests.keys import ec_spki, rsa_spki


def _log_id(spki: bytes) -> str:
    return base64.b64encode(hashlib.sha256(spki).digest()).decode()


class TestDescribePublicKey:
    def test_ec_p256(self) -> None:
        assert describe_public_key(ec_spki()) == "EC secp256r1"

    def test_ec_p384(self) -> None:
        assert describe_public_key(ec_spki(ec.SECP384R1())) == "EC secp384r1"

    def test_rsa(self) -> None:
        assert describe_public_key(rsa_spki(2048)) == "RSA 2048"

    def test_ed25519(self) -> None:
        spki = ed25519.Ed25519PrivateKey.generate().public_key().public_bytes(
            Encoding.DER, PublicFormat.SubjectPublicKeyInfo
        )
        assert describe_public_key(spki) == "Ed25519"

    def test_opaque_blob_is_unparsable(self) -> None:
        assert describe_public_key(opaque_sequence(20)) == "unparsable"


class TestRenderTrustList:
    """
    GIVEN a trust list with two CT logs
    WHEN rendered
    THEN the default output is one base64 log ID per line, in input order.
    """

    def test_default_output_is_log_ids(self) -> None:
        first, second = ec_spki(), rsa_spki()
        trust_list = TrustList(
            sequence_number=5,
            effective_date=datetime(2025, 3, 11, tzinfo=UTC),
            log_list_version=(1,),
            logs=(first, second),
        )
        assert render_trust_list(trust_list) == [_log_id(first), _log_id(second)]

    def test_no_logs_renders_nothing(self) -> None:
        trust_list = TrustList(sequence_number=5, effective_date=datetime(2025, 3, 11, tzinfo=UTC))
        assert render_trust_list(trust_list) == []

    def test_verbose_output(self) -> None:
        spki = ec_spki()
        trust_list = TrustList(
            sequence_number=2**70,
            effective_date=datetime(2025, 3, 11, 18, 42, 7, tzinfo=UTC),
            log_list_version=(1, 2),
            logs=(spki,),
        )
        lines = render_trust_list(trust_list, verbose=True)
        assert lines[:4] == [
            f"Sequence number: {2**70}",
            "Effective date:  2025-03-11T18:42:07+00:00",
            "Log list version: 1, 2",
            "CT logs: 1",
        ]
        assert lines[4] == f"{_log_id(spki)}  {hashlib.sha256(spki).hexdigest()}  EC secp256r1"

    def test_verbose_without_versions(self) -> None:
        trust_list = TrustList(sequence_number=1, effective_date=datetime(2025, 1, 1, tzinfo=UTC))
        assert "Log list version: none" in render_trust_list(trust_list, verbose=True)
