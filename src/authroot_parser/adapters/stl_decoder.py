"""
authroot.stl decoder adapter — PKCS#7 unwrapping + CTL + CT-log extension.

Adapter layer — implements the TrustListDecoder port with a fixed walk over
two schemas, expressed as a linear sequence of DerCursor calls:

  raw DER bytes
    → parse_pkcs7: ContentInfo → SignedData → contentInfo → [0] content
    → parse_ctl: sequence number, effective date, extensions
    → parse_ct_logs: CT-log extension (1.3.6.1.4.1.311.10.3.52)
    → TrustList (domain model)

Fields the consumer does not need (digest algorithms, subject usage,
subject algorithm, trusted subjects) are validated for framing and skipped;
certificates and signer infos after contentInfo are never read.
Each stage wraps inner failures with its own description, so a DecodeError
reads outer → inner → malformed field.
"""

from __future__ import annotations

import structlog
from railway import ErrorCode
from railway.result import Result

from authroot_parser.der.cursor import (
    DerCursor,
    ObjectIdentifier,
    Tag,
    context_specific,
    format_oid,
)
from authroot_parser.der.errors import DecodeError, DecodeErrorKind, decoding_stage
from authroot_parser.domain.models import TrustList

log = structlog.get_logger()

# ─────────────────────── Schema constants ───────────────────────

OID_PKCS7_SIGNED_DATA: ObjectIdentifier = (1, 2, 840, 113549, 1, 7, 2)
OID_CTL: ObjectIdentifier = (1, 3, 6, 1, 4, 1, 311, 10, 1)
OID_CT_LOGS_EXTENSION: ObjectIdentifier = (1, 3, 6, 1, 4, 1, 311, 10, 3, 52)

_EXPLICIT_0 = context_specific(0)


def _check_content_type(oid: ObjectIdentifier, expected: ObjectIdentifier, what: str) -> None:
    if oid != expected:
        raise DecodeError(
            DecodeErrorKind.CONTENT_TYPE,
            f"unexpected {what} content type {format_oid(oid)}, expected {format_oid(expected)}",
        )


# ─────────────────────── PKCS#7 envelope ───────────────────────
#
# ContentInfo ::= SEQUENCE {
#     contentType  OBJECT IDENTIFIER,          -- signedData
#     content      [0] EXPLICIT SignedData }
#
# SignedData ::= SEQUENCE {
#     version           INTEGER,
#     digestAlgorithms  SET OF AlgorithmIdentifier,
#     contentInfo       SEQUENCE {
#         contentType   OBJECT IDENTIFIER,     -- szOID_CTL
#         content       [0] EXPLICIT ANY },
#     ... certificates, crls, signerInfos: never read }


def parse_pkcs7(der: bytes | DerCursor, strict: bool = True) -> tuple[ObjectIdentifier, bytes]:
    """
    Unwrap a PKCS#7 SignedData ContentInfo.

    Returns the inner content type and the inner content element (tag,
    length and value, whatever its tag). With ``strict`` the outer content
    type must be signedData and the inner one szOID_CTL.
    """
    cursor = der if isinstance(der, DerCursor) else DerCursor(der)

    content_info = cursor.read_sequence("ContentInfo SEQUENCE")
    outer_type = content_info.read_object_identifier("content type OBJECT IDENTIFIER")
    if strict:
        _check_content_type(outer_type, OID_PKCS7_SIGNED_DATA, "PKCS#7")

    wrapper = content_info.read(_EXPLICIT_0, "content [0]")
    signed_data = wrapper.read_sequence("SignedData SEQUENCE")
    signed_data.skip(Tag.INTEGER, "version INTEGER")
    signed_data.skip(Tag.SET, "digestAlgorithms SET")

    inner_info = signed_data.read_sequence("contentInfo SEQUENCE")
    inner_type = inner_info.read_object_identifier("content OBJECT IDENTIFIER")
    if strict:
        _check_content_type(inner_type, OID_CTL, "SignedData")

    inner_wrapper = inner_info.read(_EXPLICIT_0, "contentInfo content [0]")
    _, content = inner_wrapper.read_any_element("content element")
    return inner_type, content


# ─────────────────────── Certificate Trust List ───────────────────────
#
# CertificateTrustList ::= SEQUENCE {
#     subjectUsage         SEQUENCE OF OBJECT IDENTIFIER,
#     sequenceNumber       INTEGER,
#     ctlThisUpdate        UTCTime,
#     subjectAlgorithm     AlgorithmIdentifier,
#     trustedSubjects      SEQUENCE OF TrustedSubject,
#     ctlExtensions        [0] EXPLICIT Extensions OPTIONAL }
#
# Extension ::= SEQUENCE {
#     extnID     OBJECT IDENTIFIER,
#     critical   BOOLEAN OPTIONAL,
#     extnValue  OCTET STRING }


def parse_ctl(content: bytes | DerCursor) -> TrustList:
    """
    Decode the CTL body into a TrustList.

    The buffer must hold exactly one SEQUENCE. Extensions other than the
    CT-log list are read for framing and discarded; if the CT-log extension
    occurs more than once, the last one wins.
    """
    cursor = content if isinstance(content, DerCursor) else DerCursor(content)

    ctl = cursor.read_sequence("CTL SEQUENCE")
    cursor.expect_empty("CTL SEQUENCE")

    ctl.skip(Tag.SEQUENCE, "subjectUsage SEQUENCE")
    sequence_number = ctl.read_integer("sequence number INTEGER")
    if sequence_number < 0:
        raise DecodeError(
            DecodeErrorKind.RANGE,
            f"malformed sequence number INTEGER: negative value {sequence_number}",
        )
    effective_date = ctl.read_utc_time("effective date UTCTime")
    ctl.skip(Tag.SEQUENCE, "subjectAlgorithm SEQUENCE")
    ctl.skip(Tag.SEQUENCE, "trustedSubjects SEQUENCE")

    versions: tuple[int, ...] = ()
    logs: tuple[bytes, ...] = ()

    wrapper = ctl.read_optional(_EXPLICIT_0, "extensions [0]")
    if wrapper is not None:
        extensions = wrapper.read_sequence("inner extensions SEQUENCE")
        while not extensions.is_empty():
            extension = extensions.read_sequence("extension SEQUENCE")
            oid = extension.read_object_identifier("extension OBJECT IDENTIFIER")
            extension.skip_optional(Tag.BOOLEAN, "extension BOOLEAN")
            value = extension.read(Tag.OCTET_STRING, "extension OCTET STRING")
            if oid == OID_CT_LOGS_EXTENSION:
                with decoding_stage("error parsing CT logs extension"):
                    versions, logs = parse_ct_logs(value)

    return TrustList(
        sequence_number=sequence_number,
        effective_date=effective_date,
        log_list_version=versions,
        logs=logs,
    )


# ─────────────────────── CT-log extension ───────────────────────
#
# CtLogList ::= SEQUENCE {
#     version  SEQUENCE OF INTEGER,
#     logs     SubjectPublicKeyInfo ... }     -- remaining elements


def parse_ct_logs(value: bytes | DerCursor) -> tuple[tuple[int, ...], tuple[bytes, ...]]:
    """
    Decode the CT-log extension value into (versions, SPKI blobs).

    SPKI blobs are returned whole and unparsed; key semantics belong to the
    consumer.
    """
    cursor = value if isinstance(value, DerCursor) else DerCursor(value)

    sequence = cursor.read_sequence("CT logs SEQUENCE")
    cursor.expect_empty("CT logs SEQUENCE")

    version_sequence = sequence.read_sequence("version SEQUENCE")
    versions: list[int] = []
    while not version_sequence.is_empty():
        versions.append(version_sequence.read_integer_i32("version INTEGER"))

    pubkeys: list[bytes] = []
    while not sequence.is_empty():
        pubkeys.append(sequence.read_element(Tag.SEQUENCE, "SPKI SEQUENCE"))

    return tuple(versions), tuple(pubkeys)


def decode_trust_list(der: bytes | bytearray | memoryview, strict: bool = True) -> TrustList:
    """Decode a DER-encoded authroot.stl. Raises DecodeError on malformed input."""
    with decoding_stage("error parsing PKCS#7"):
        _, content = parse_pkcs7(DerCursor(der), strict=strict)
    with decoding_stage("error parsing CTL"):
        return parse_ctl(content)


# ─────────────────────── Public Decoder Class ───────────────────────


class DerTrustListDecoder:
    """
    Decode authroot.stl DER into a TrustList.

    Implements the TrustListDecoder port. Only DecodeError is converted into
    a failure; anything else is a bug and propagates.
    """

    def __init__(self, strict_content_types: bool = True) -> None:
        self._strict = strict_content_types

    def decode(self, der: bytes) -> Result[TrustList]:
        """
        Returns Result[TrustList] on success.
        Returns Result.failure(DECODE_ERROR, ...) carrying the DecodeError on malformed input.
        """
        try:
            trust_list = decode_trust_list(der, strict=self._strict)
        except DecodeError as e:
            log.warning(
                "stl_decoder.failed",
                kind=e.kind.value,
                error=str(e),
                size_bytes=len(der),
            )
            return Result.failure(ErrorCode.DECODE_ERROR, str(e), e)

        log.info(
            "stl_decoder.complete",
            sequence_number=str(trust_list.sequence_number),
            effective_date=trust_list.effective_date.isoformat(),
            log_list_version=list(trust_list.log_list_version),
            logs=len(trust_list.logs),
        )
        return Result.success(trust_list)
