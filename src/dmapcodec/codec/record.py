"""Record codec.

A record is a fixed 16-byte header followed by its fields:

    code (i32) | total length (i32) | scalar count (i32) | array count (i32)

The total length includes the header, so a stream of records can be walked
by header peeks alone.
"""

from __future__ import annotations

import struct

from ..exceptions import (
    DuplicateField,
    EncodeError,
    InvalidHeader,
    RecordLengthMismatch,
    UnexpectedEof,
)
from ..models.field import Field
from ..models.record import Record, RecordHeader
from ..types import HEADER_SIZE
from .cursor import ByteCursor, ByteWriter
from .fields import decode_field, write_field

_HEADER = struct.Struct("<iiii")

_MAX_RECORD_SIZE = 2**31 - 1


def peek_header(buffer: bytes | bytearray | memoryview, offset: int = 0) -> RecordHeader:
    """Read the header at ``offset`` without decoding any field.

    Args:
        buffer: Buffer holding one or more records
        offset: Byte offset of the record

    Returns:
        The header exactly as stored

    Raises:
        UnexpectedEof: If fewer than 16 bytes remain at ``offset``
    """
    available = len(buffer) - offset
    if available < HEADER_SIZE:
        raise UnexpectedEof(offset, HEADER_SIZE, max(0, available), "record header")
    code, size, scalars, arrays = _HEADER.unpack_from(buffer, offset)
    return RecordHeader(code, size, scalars, arrays)


def check_header(header: RecordHeader, offset: int = 0) -> None:
    """Reject header values no record can carry.

    Raises:
        InvalidHeader: On a negative count or a length shorter than the header
    """
    if header.scalar_count < 0 or header.array_count < 0:
        raise InvalidHeader(
            f"negative field count (scalars={header.scalar_count}, arrays={header.array_count})",
            offset,
        )
    if header.size < HEADER_SIZE:
        raise InvalidHeader(f"declared length {header.size} is shorter than the header", offset)


def decode_record(buffer: bytes | bytearray | memoryview, offset: int = 0) -> tuple[Record, int]:
    """Decode the record starting at ``offset``.

    Fields are read until the header's field count is reached. The bytes
    consumed must then equal the declared length.

    Args:
        buffer: Read-only buffer holding the record
        offset: Byte offset of the record header

    Returns:
        Tuple of (decoded Record, total record length in bytes)

    Raises:
        UnexpectedEof: If the buffer ends inside the record
        InvalidHeader: If the header is impossible or its counts disagree with the fields
        RecordLengthMismatch: If the fields do not span exactly the declared length
        DuplicateField: If a field name repeats
        UnknownTypeCode: If a type byte is not registered
        InvalidDimension: If an array shape is invalid

    Example:
        >>> record, length = decode_record(encode_record(record))
    """
    header = peek_header(buffer, offset)
    check_header(header, offset)

    cursor = ByteCursor(buffer, offset + HEADER_SIZE)
    fields: dict[str, Field] = {}
    arrays = 0
    for _ in range(header.field_count):
        field_offset = cursor.position
        field, _consumed = decode_field(cursor)
        if field.name in fields:
            raise DuplicateField(field.name, field_offset)
        fields[field.name] = field
        if field.is_array:
            arrays += 1

    consumed = cursor.position - offset
    if consumed != header.size:
        raise RecordLengthMismatch(header.size, consumed, offset)
    if arrays != header.array_count:
        raise InvalidHeader(
            f"header declares {header.scalar_count} scalars and {header.array_count} arrays, "
            f"fields hold {len(fields) - arrays} scalars and {arrays} arrays",
            offset,
        )
    return Record(fields.values(), code=header.code), consumed


def encode_record(record: Record) -> bytes:
    """Encode a record with a freshly computed header.

    Args:
        record: Record to encode

    Returns:
        Wire bytes of the record

    Raises:
        EncodeError: If a value does not fit its type or the record exceeds 2 GiB
    """
    body = ByteWriter()
    arrays = 0
    for field in record.values():
        write_field(body, field)
        if field.is_array:
            arrays += 1

    size = HEADER_SIZE + len(body)
    if size > _MAX_RECORD_SIZE:
        raise EncodeError(f"Record of {size} bytes does not fit a 32-bit length")
    try:
        header = _HEADER.pack(record.code, size, len(record) - arrays, arrays)
    except struct.error as e:
        raise EncodeError(f"Record code {record.code} does not fit 32 bits") from e
    return header + body.to_bytes()
