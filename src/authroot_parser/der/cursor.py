"""
DER cursor — primitive reads over a tag-length-value byte stream.

A DerCursor is a read position inside an immutable byte window. Each read
validates one element (tag, length, and for typed reads the value encoding),
advances past it and returns its payload. Sub-structures come back as new
cursors over the same buffer, so nothing is copied until a caller asks for
raw bytes.

Only the DER subset the trust-list schemas need is supported:
  - single-octet tags (high-tag-number form is rejected)
  - definite lengths, minimally encoded, at most 4 length octets
  - INTEGER, OBJECT IDENTIFIER and UTCTime value decoding

A failed read raises DecodeError and leaves the cursor in an unspecified
position; callers abandon the cursor instead of retrying.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta, timezone
from enum import IntEnum

from authroot_parser.der.errors import DecodeError, DecodeErrorKind

ObjectIdentifier = tuple[int, ...]

_CONTEXT_SPECIFIC = 0x80
_CONSTRUCTED = 0x20
_HIGH_TAG_NUMBER = 0x1F
_MAX_LENGTH_OCTETS = 4

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_UTC_TIME = re.compile(
    rb"([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})([0-9]{2})?(Z|[+-][0-9]{4})"
)


class Tag(IntEnum):
    """Universal tags used by the PKCS#7 and CTL schemas."""

    BOOLEAN = 0x01
    INTEGER = 0x02
    OCTET_STRING = 0x04
    OBJECT_IDENTIFIER = 0x06
    UTC_TIME = 0x17
    SEQUENCE = 0x30
    SET = 0x31


def context_specific(number: int, constructed: bool = True) -> int:
    """Return the single-octet tag for ``[number]`` in the context-specific class."""
    if not 0 <= number < _HIGH_TAG_NUMBER:
        raise ValueError(f"context-specific tag number out of range: {number}")
    return _CONTEXT_SPECIFIC | (_CONSTRUCTED if constructed else 0) | number


def tag_name(tag: int) -> str:
    """Human-readable tag name for error messages."""
    if tag in Tag._value2member_map_:
        return f"{Tag(tag).name.replace('_', ' ')} (0x{tag:02x})"
    if tag & 0xC0 == _CONTEXT_SPECIFIC:
        return f"[{tag & _HIGH_TAG_NUMBER}] (0x{tag:02x})"
    return f"tag 0x{tag:02x}"


def format_oid(oid: ObjectIdentifier) -> str:
    return ".".join(str(arc) for arc in oid)


class DerCursor:
    """Read position over a window ``[start, end)`` of a DER buffer."""

    __slots__ = ("_data", "_offset", "_end")

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        # bytes input is shared with sub-cursors; anything mutable is copied once
        self._data = data if isinstance(data, bytes) else bytes(data)
        self._end = len(self._data) if end is None else end
        if not 0 <= start <= self._end <= len(self._data):
            raise ValueError(f"invalid cursor window [{start}, {end}) over {len(self._data)} bytes")
        self._offset = start

    # ──────────────────────── Position ────────────────────────

    @property
    def remaining(self) -> int:
        return self._end - self._offset

    def __repr__(self) -> str:
        return f"DerCursor(offset={self._offset}, remaining={self.remaining})"

    def is_empty(self) -> bool:
        return self._offset >= self._end

    def expect_empty(self, what: str = "structure") -> None:
        """Raise TRAILING_DATA if anything is left in the window."""
        if not self.is_empty():
            raise DecodeError(
                DecodeErrorKind.TRAILING_DATA,
                f"trailing bytes after {what}: {self.remaining} unexpected byte(s)",
            )

    def peek_tag(self) -> int | None:
        return None if self.is_empty() else self._data[self._offset]

    # ──────────────────────── Element framing ────────────────────────

    def _take(self, expected: int | None, field: str | None) -> tuple[int, int, int, int]:
        """
        Consume one element.

        Returns (tag, element_start, content_start, content_end). The declared
        length is checked against the window before the position moves.
        """
        what = field or (tag_name(expected) if expected is not None else "element")
        data, start, end = self._data, self._offset, self._end

        if end - start < 2:
            raise DecodeError(
                DecodeErrorKind.LENGTH,
                f"malformed {what}: truncated header ({end - start} byte(s) left)",
            )

        tag = data[start]
        if expected is not None and tag != expected:
            raise DecodeError(
                DecodeErrorKind.STRUCTURE,
                f"malformed {what}: expected {tag_name(expected)}, found {tag_name(tag)}",
            )
        if tag & _HIGH_TAG_NUMBER == _HIGH_TAG_NUMBER:
            raise DecodeError(
                DecodeErrorKind.STRUCTURE,
                f"malformed {what}: high-tag-number form is not supported",
            )

        first = data[start + 1]
        if first < 0x80:
            header, length = 2, first
        elif first == 0x80:
            raise DecodeError(
                DecodeErrorKind.LENGTH,
                f"malformed {what}: indefinite length is not allowed in DER",
            )
        else:
            octets = first & 0x7F
            if octets > _MAX_LENGTH_OCTETS:
                raise DecodeError(
                    DecodeErrorKind.LENGTH,
                    f"malformed {what}: {octets} length octets exceed the supported {_MAX_LENGTH_OCTETS}",
                )
            if end - start - 2 < octets:
                raise DecodeError(
                    DecodeErrorKind.LENGTH,
                    f"malformed {what}: truncated length octets",
                )
            length_bytes = data[start + 2:start + 2 + octets]
            length = int.from_bytes(length_bytes, "big")
            if length_bytes[0] == 0 or length < 0x80:
                raise DecodeError(
                    DecodeErrorKind.LENGTH,
                    f"malformed {what}: length {length} is not minimally encoded",
                )
            header = 2 + octets

        available = end - start - header
        if length > available:
            raise DecodeError(
                DecodeErrorKind.LENGTH,
                f"malformed {what}: declared length {length} exceeds {available} remaining byte(s)",
            )

        content_start = start + header
        content_end = content_start + length
        self._offset = content_end
        return tag, start, content_start, content_end

    def _content(self, tag: int, field: str | None) -> bytes:
        _, _, content_start, content_end = self._take(tag, field)
        return self._data[content_start:content_end]

    # ──────────────────────── Structural reads ────────────────────────

    def read(self, tag: int, field: str | None = None) -> DerCursor:
        """Read an element with the given tag and return a cursor over its contents."""
        _, _, content_start, content_end = self._take(tag, field)
        return DerCursor(self._data, content_start, content_end)

    def read_sequence(self, field: str | None = None) -> DerCursor:
        return self.read(Tag.SEQUENCE, field)

    def read_element(self, tag: int, field: str | None = None) -> bytes:
        """Read an element with the given tag and return it whole: tag, length and contents."""
        _, element_start, _, content_end = self._take(tag, field)
        return self._data[element_start:content_end]

    def read_any_element(self, field: str | None = None) -> tuple[int, bytes]:
        """Read the next element whatever its tag; returns (tag, whole element)."""
        tag, element_start, _, content_end = self._take(None, field)
        return tag, self._data[element_start:content_end]

    def skip(self, tag: int, field: str | None = None) -> None:
        """Validate and discard an element with the given tag."""
        self._take(tag, field)

    def skip_optional(self, tag: int, field: str | None = None) -> bool:
        """Skip the next element if it carries ``tag``; returns whether it was present."""
        if self.peek_tag() != tag:
            return False
        self._take(tag, field)
        return True

    def read_optional(self, tag: int, field: str | None = None) -> DerCursor | None:
        """Read the next element's contents if it carries ``tag``, else return None."""
        if self.peek_tag() != tag:
            return None
        return self.read(tag, field)

    # ──────────────────────── Typed reads ────────────────────────

    def read_integer(self, field: str | None = None) -> int:
        """Read an INTEGER of any size (two's complement, big-endian)."""
        what = field or "INTEGER"
        content = self._content(Tag.INTEGER, field)
        if not content:
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: empty contents")
        if len(content) > 1 and (
            (content[0] == 0x00 and content[1] & 0x80 == 0)
            or (content[0] == 0xFF and content[1] & 0x80 == 0x80)
        ):
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: not minimally encoded")
        return int.from_bytes(content, "big", signed=True)

    def read_integer_i32(self, field: str | None = None) -> int:
        """Read an INTEGER that must fit in a signed 32-bit value."""
        value = self.read_integer(field)
        if not _INT32_MIN <= value <= _INT32_MAX:
            raise DecodeError(
                DecodeErrorKind.RANGE,
                f"malformed {field or 'INTEGER'}: {value} does not fit in 32 bits",
            )
        return value

    def read_object_identifier(self, field: str | None = None) -> ObjectIdentifier:
        what = field or "OBJECT IDENTIFIER"
        content = self._content(Tag.OBJECT_IDENTIFIER, field)
        if not content:
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: empty contents")
        if content[-1] & 0x80:
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: truncated arc")

        subidentifiers: list[int] = []
        value = 0
        arc_start = True
        for octet in content:
            if arc_start and octet == 0x80:
                raise DecodeError(
                    DecodeErrorKind.STRUCTURE, f"malformed {what}: arc not minimally encoded"
                )
            value = (value << 7) | (octet & 0x7F)
            arc_start = not octet & 0x80
            if arc_start:
                subidentifiers.append(value)
                value = 0

        # X.690 8.19.4: the first subidentifier packs the first two arcs
        first = subidentifiers[0]
        if first < 80:
            head = (first // 40, first % 40)
        else:
            head = (2, first - 80)
        return head + tuple(subidentifiers[1:])

    def read_utc_time(self, field: str | None = None) -> datetime:
        """
        Read a UTCTime as an aware UTC datetime.

        Accepts YYMMDDhhmm[ss] followed by Z or a non-zero ±hhmm offset.
        Two-digit years below 50 are 20YY, the rest 19YY.
        """
        what = field or "UTCTime"
        content = self._content(Tag.UTC_TIME, field)
        match = _UTC_TIME.fullmatch(content)
        if match is None:
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: invalid value {content!r}")

        yy, month, day, hour, minute = (int(group) for group in match.group(1, 2, 3, 4, 5))
        second = int(match.group(6)) if match.group(6) is not None else 0
        zone = match.group(7)

        if zone == b"Z":
            tz = UTC
        else:
            offset_hours, offset_minutes = int(zone[1:3]), int(zone[3:5])
            if offset_hours == 0 and offset_minutes == 0:
                raise DecodeError(
                    DecodeErrorKind.STRUCTURE,
                    f"malformed {what}: zero offset must be written as Z",
                )
            if offset_hours > 23 or offset_minutes > 59:
                raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: invalid offset {zone!r}")
            offset = timedelta(hours=offset_hours, minutes=offset_minutes)
            tz = timezone(-offset if zone[:1] == b"-" else offset)

        year = 2000 + yy if yy < 50 else 1900 + yy
        try:
            moment = datetime(year, month, day, hour, minute, second, tzinfo=tz)
        except ValueError as e:
            raise DecodeError(DecodeErrorKind.STRUCTURE, f"malformed {what}: {e}") from e
        return moment.astimezone(UTC)
