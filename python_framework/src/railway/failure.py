"""
Failure description — structured error information for the failure track.

A FailureDescription carries an ErrorCode, a message for the layer that
reported it, the exception that caused it (if any) and, when a later stage
adds context, the inner FailureDescription it wraps:

    error decoding authroot.stl            ← pipeline stage (wrap)
      └── error parsing CTL: malformed ... ← adapter failure (exception attached)

str(failure) renders the chain outer → inner, which is what an operator
reads; .root() gives programmatic access to the innermost failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """Structured error codes for the failure track."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Invalid input format, missing fields, type mismatches."""

    NOT_FOUND = "NOT_FOUND"
    """Resource doesn't exist (missing file, missing archive member)."""

    DECODE_ERROR = "DECODE_ERROR"
    """Malformed binary input: unexpected tag, bad length, trailing data."""

    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    """Infrastructure issues."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """System misconfiguration."""

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    """External HTTP call failures."""

    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    """Operation exceeded its deadline."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    """Unexpected/unclassified failures."""


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception,
    optional wrapped cause, and timestamp.

    >>> desc = FailureDescription(ErrorCode.DECODE_ERROR, "malformed SEQUENCE")
    >>> str(desc.wrap("error parsing CTL"))
    'error parsing CTL: malformed SEQUENCE'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    cause: Optional[FailureDescription] = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @staticmethod
    def create(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> FailureDescription:
        return FailureDescription(code=code, message=message, exception=exception)

    def wrap(self, message: str) -> FailureDescription:
        """Add an outer layer of context, keeping the error code of the cause."""
        return FailureDescription(code=self.code, message=message, cause=self)

    def root(self) -> FailureDescription:
        """Return the innermost failure of the chain."""
        current = self
        while current.cause is not None:
            current = current.cause
        return current

    def chain(self) -> list[str]:
        """
        Messages from the outermost layer to the innermost one.

        The root exception's own text is appended when it adds information
        beyond the root message (e.g. an httpx error or a DecodeError chain).
        """
        messages: list[str] = []
        current: Optional[FailureDescription] = self
        while current is not None:
            messages.append(current.message)
            if current.cause is None and current.exception is not None:
                detail = str(current.exception)
                if detail and detail != current.message:
                    messages.append(detail)
            current = current.cause
        return messages

    def __str__(self) -> str:
        return ": ".join(self.chain())
