"""
Shared test fixtures for the authroot-parser test suite.

Synthetic authroot.stl inputs are built with the hand-written encoder in
tests/der_builder.py; real CT log keys come from tests/keys.py.
"""

from __future__ import annotations

import pytest

from tests.der_builder import build_authroot_stl, opaque_sequence


@pytest.fixture()
def opaque_spkis() -> tuple[bytes, bytes]:
    """Two syntactically valid, semantically meaningless SPKI SEQUENCEs of 10 and 20 bytes."""
    return opaque_sequence(10, fill=0x11), opaque_sequence(20, fill=0x22)


@pytest.fixture()
def authroot_stl(opaque_spkis: tuple[bytes, bytes]) -> bytes:
    """A valid PKCS#7-wrapped CTL: sequence number 1, version [1], two opaque logs."""
    return build_authroot_stl(sequence_number=1, versions=(1,), spkis=opaque_spkis)
