"""Real CT log keys for tests that need loadable SubjectPublicKeyInfo structures."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat


def ec_spki(curve: ec.EllipticCurve | None = None) -> bytes:
    """DER SubjectPublicKeyInfo of a fresh EC key (P-256 by default)."""
    key = ec.generate_private_key(curve or ec.SECP256R1())
    return key.public_key().public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)


def rsa_spki(key_size: int = 2048) -> bytes:
    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return key.public_key().public_bytes(Encoding.DER, PublicFormat.SubjectPublicKeyInfo)
