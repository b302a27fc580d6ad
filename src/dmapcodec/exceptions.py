"""Exception hierarchy for dmapcodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from DmapError for easy catching of any dmapcodec-specific error.

Structural errors (DecodeError and subclasses) mean the byte stream itself is
broken: decoding of the current record stops immediately. Semantic errors
(ValidationError and subclasses) describe a well-formed record that does not
satisfy a named schema.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence


class DmapError(Exception):
    """Base exception for all dmapcodec errors."""

    pass


class DecodeError(DmapError):
    """Raised when a byte stream is structurally invalid.

    Examples:
        - Truncated data (insufficient bytes)
        - Unknown type code
        - Zero or negative array dimensions
        - Declared record length disagrees with the bytes consumed
    """

    pass


class UnknownTypeCode(DecodeError):
    """Raised when a type byte does not map to a registered type code."""

    def __init__(self, code: int, offset: Optional[int] = None) -> None:
        self.code = code
        self.offset = offset
        where = f" at byte {offset}" if offset is not None else ""
        super().__init__(f"Unknown type code {code:#04x}{where}")


class UnexpectedEof(DecodeError):
    """Raised when fewer bytes remain than a read requires."""

    def __init__(self, offset: int, needed: int, available: int, what: str = "data") -> None:
        self.offset = offset
        self.needed = needed
        self.available = available
        self.what = what
        super().__init__(
            f"Unexpected end of data reading {what} at byte {offset}: "
            f"need {needed} bytes, {available} available"
        )


class InvalidDimension(DecodeError):
    """Raised when an array shape is empty, non-positive, or too large."""

    def __init__(
        self, name: str, dimensions: Sequence[int], reason: str, offset: Optional[int] = None
    ) -> None:
        self.name = name
        self.dimensions = tuple(dimensions)
        self.reason = reason
        self.offset = offset
        where = f" at byte {offset}" if offset is not None else ""
        super().__init__(
            f"Invalid dimensions {list(self.dimensions)} for field '{name}'{where}: {reason}"
        )


class RecordLengthMismatch(DecodeError):
    """Raised when the bytes consumed by a record differ from its declared length."""

    def __init__(self, declared: int, actual: int, offset: int = 0) -> None:
        self.declared = declared
        self.actual = actual
        self.offset = offset
        super().__init__(
            f"Record at byte {offset} declares {declared} bytes but its fields span {actual} bytes"
        )


class DuplicateField(DecodeError):
    """Raised when a field name appears twice in one record."""

    def __init__(self, name: str, offset: Optional[int] = None) -> None:
        self.name = name
        self.offset = offset
        where = f" at byte {offset}" if offset is not None else ""
        super().__init__(f"Duplicate field '{name}'{where}")


class InvalidHeader(DecodeError):
    """Raised when a record header carries impossible values.

    Examples:
        - Negative scalar or array count
        - Declared length smaller than the header itself
        - Header counts that disagree with the decoded fields

    When raised by the stream scanner, ``partial_index`` holds the index
    entries found before the bad header.
    """

    def __init__(
        self, message: str, offset: int = 0, partial_index: Sequence[Any] = ()
    ) -> None:
        self.offset = offset
        self.partial_index = list(partial_index)
        super().__init__(f"Invalid record header at byte {offset}: {message}")


class TruncatedRecord(DecodeError):
    """Raised by the stream scanner when a record runs past the end of the data.

    The index entries found before the break are kept in ``partial_index`` so
    callers can still process everything that precedes it.
    """

    def __init__(
        self,
        offset: int,
        declared: Optional[int],
        available: int,
        partial_index: Sequence[Any] = (),
    ) -> None:
        self.offset = offset
        self.declared = declared
        self.available = available
        self.partial_index = list(partial_index)
        if declared is None:
            detail = f"only {available} bytes remain, too few for a record header"
        else:
            detail = f"record declares {declared} bytes but only {available} remain"
        super().__init__(f"Truncated record at byte {offset}: {detail}")


class EncodeError(DmapError):
    """Raised when encoding a record fails.

    Examples:
        - Value out of range for its type code
        - String value that is not text
        - Record larger than a 32-bit length field can describe
    """

    pass


class ValidationError(DmapError):
    """Raised when a well-formed record does not satisfy a schema."""

    pass


class MissingField(ValidationError):
    """Raised when a schema's required field is absent from a record."""

    def __init__(self, name: str, schema: str = "") -> None:
        self.name = name
        self.schema = schema
        suffix = f" for {schema}" if schema else ""
        super().__init__(f"Required field '{name}' missing{suffix}")


class FieldTypeMismatch(ValidationError):
    """Raised when a field has the wrong type code or shape class."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Field '{name}' is {actual}, expected {expected}")


class InconsistentDimensions(ValidationError):
    """Raised when array fields that must share a shape do not."""

    def __init__(self, shapes: dict[str, tuple[int, ...]]) -> None:
        self.shapes = dict(shapes)
        listing = ", ".join(f"{name}={list(shape)}" for name, shape in self.shapes.items())
        super().__init__(f"Array fields have inconsistent dimensions: {listing}")


class UnsupportedSchema(DmapError):
    """Raised when a schema name does not match any known format."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unsupported schema {name!r}")
