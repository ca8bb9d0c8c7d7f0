"""
Decode errors — one exception type, classified by kind, chained by stage.

Every DER primitive and every schema walk raises DecodeError. A stage that
delegates to an inner stage wraps the inner error instead of replacing it,
so the final message reads outer → inner → malformed field:

    error parsing CTL: error parsing CT logs extension: malformed SPKI SEQUENCE: ...

The kind of the innermost error is carried up the chain unchanged, which is
what callers inspect programmatically.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum, unique


@unique
class DecodeErrorKind(Enum):
    """Classification of a decode failure."""

    STRUCTURE = "structure"
    """Expected tag/class not found, or unsupported encoding form."""

    LENGTH = "length"
    """Declared length exceeds the remaining buffer or violates DER rules."""

    TRAILING_DATA = "trailing_data"
    """Extra bytes follow a structure required to be self-contained."""

    RANGE = "range"
    """A value does not fit the target width or domain."""

    CONTENT_TYPE = "content_type"
    """An envelope content type is not the expected object identifier."""


class DecodeError(ValueError):
    """A DER buffer could not be decoded."""

    def __init__(
        self,
        kind: DecodeErrorKind,
        message: str,
        cause: DecodeError | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.cause = cause
        super().__init__(str(self))

    def within(self, stage: str) -> DecodeError:
        """Wrap this error in an outer stage, keeping its kind."""
        return DecodeError(self.kind, stage, cause=self)

    @property
    def root(self) -> DecodeError:
        error = self
        while error.cause is not None:
            error = error.cause
        return error

    @property
    def stages(self) -> list[str]:
        messages = [self.message]
        error = self.cause
        while error is not None:
            messages.append(error.message)
            error = error.cause
        return messages

    def __str__(self) -> str:
        return ": ".join(self.stages)

    def __repr__(self) -> str:
        return f"DecodeError({self.kind.value}: {str(self)!r})"


@contextmanager
def decoding_stage(stage: str) -> Iterator[None]:
    """Re-raise any DecodeError from the block wrapped in ``stage``."""
    try:
        yield
    except DecodeError as e:
        raise e.within(stage) from e
