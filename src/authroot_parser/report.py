"""
Report — render a decoded TrustList for the console.

Default output is one line per CT log: the base64 SHA-256 of its SPKI (the
RFC 6962 log ID), in the order the trust list carries them. Verbose output
adds the trust-list header and, per log, the hex ID and key algorithm.

Key parsing happens here and only here: the decoder treats SPKIs as opaque,
so a key cryptography cannot load is reported as "unparsable" instead of
failing the run.
"""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa
from cryptography.hazmat.primitives.serialization import load_der_public_key

from authroot_parser.domain.models import CtLogKey, TrustList


def describe_public_key(spki: bytes) -> str:
    """Short algorithm description such as "EC secp256r1" or "RSA 2048"."""
    try:
        key = load_der_public_key(spki)
    except (ValueError, UnsupportedAlgorithm):
        return "unparsable"

    match key:
        case ec.EllipticCurvePublicKey():
            return f"EC {key.curve.name}"
        case rsa.RSAPublicKey():
            return f"RSA {key.key_size}"
        case ed25519.Ed25519PublicKey():
            return "Ed25519"
        case ed448.Ed448PublicKey():
            return "Ed448"
        case _:
            return type(key).__name__


def render_trust_list(trust_list: TrustList, verbose: bool = False) -> list[str]:
    keys = CtLogKey.from_trust_list(trust_list)
    if not verbose:
        return [key.key_id_base64 for key in keys]

    versions = ", ".join(str(v) for v in trust_list.log_list_version) or "none"
    lines = [
        f"Sequence number: {trust_list.sequence_number}",
        f"Effective date:  {trust_list.effective_date.isoformat()}",
        f"Log list version: {versions}",
        f"CT logs: {len(keys)}",
    ]
    for key in keys:
        lines.append(f"{key.key_id_base64}  {key.key_id_hex}  {describe_public_key(key.spki)}")
    return lines
