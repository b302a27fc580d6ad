"""Field codec.

This module converts one named DMAP field to and from its wire form:

    name length (i32) | name (UTF-8) | type byte (u8) | payload

A scalar payload is one element (strings carry their own i32 length). An
array payload is a dimension count (u8), that many i32 dimensions listed
outer-to-inner, then the row-major element data. Arrays are marked by
ARRAY_FLAG on the type byte.
"""

from __future__ import annotations

from ..exceptions import DecodeError, EncodeError, UnknownTypeCode
from ..models.field import Array, Field, Scalar, check_dimensions
from ..types import ARRAY_FLAG, TypeCode, decode_scalar, dtype_of, encode_scalar, lookup, sizeof
from .cursor import ByteCursor, ByteWriter


def _read_name(cursor: ByteCursor) -> str:
    start = cursor.position
    length = cursor.read_i32("field name length")
    if length <= 0:
        raise DecodeError(f"Invalid field name length {length} at byte {start}")
    raw = cursor.read_bytes(length, "field name")
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Field name at byte {start} is not valid UTF-8") from e


def _read_scalar(cursor: ByteCursor, code: TypeCode) -> Scalar:
    if code is TypeCode.STRING:
        start = cursor.position
        length = cursor.read_i32("string length")
        if length < 0:
            raise DecodeError(f"Negative string length {length} at byte {start}")
        raw = cursor.read_bytes(length, "string value")
    else:
        raw = cursor.read_bytes(sizeof(code), f"{code.name} value")
    return Scalar(code, decode_scalar(code, raw))


def _read_array(cursor: ByteCursor, name: str, code: TypeCode, type_offset: int) -> Array:
    if code is TypeCode.STRING:
        raise UnknownTypeCode(int(code) | ARRAY_FLAG, type_offset)
    dims_offset = cursor.position
    ndims = cursor.read_u8("dimension count")
    dimensions = tuple(cursor.read_i32("dimension") for _ in range(ndims))
    count = check_dimensions(name, dimensions, dims_offset)
    data = cursor.read_array(dtype_of(code), count, f"'{name}' elements")
    return Array(code, dimensions, data)


def decode_field(cursor: ByteCursor) -> tuple[Field, int]:
    """Decode one field at the cursor position.

    Args:
        cursor: Cursor positioned at the field's name length

    Returns:
        Tuple of (decoded Field, bytes consumed)

    Raises:
        UnexpectedEof: If the cursor runs out before the field is complete
        UnknownTypeCode: If the type byte is not a registered code
        InvalidDimension: If an array shape is empty, non-positive, or too large
        DecodeError: If the name or a string value is malformed

    Example:
        >>> cursor = ByteCursor(encode_field(Field.scalar("stid", TypeCode.SHORT, 65)))
        >>> field, consumed = decode_field(cursor)
        >>> field.value, consumed
        (65, 11)
    """
    start = cursor.position
    name = _read_name(cursor)
    type_offset = cursor.position
    raw_code = cursor.read_u8("type code")
    if raw_code & ARRAY_FLAG:
        code = lookup(raw_code & ~ARRAY_FLAG, type_offset)
        payload: Scalar | Array = _read_array(cursor, name, code, type_offset)
    else:
        code = lookup(raw_code, type_offset)
        payload = _read_scalar(cursor, code)
    return Field(name, payload), cursor.position - start


def write_field(writer: ByteWriter, field: Field) -> None:
    """Append the wire form of ``field`` to ``writer``.

    The name length and type byte are derived from the field every time.
    """
    writer.write_prefixed(field.name.encode("utf-8"))
    payload = field.payload
    if isinstance(payload, Array):
        writer.write_u8(int(payload.code) | ARRAY_FLAG)
        writer.write_u8(len(payload.dimensions))
        for dim in payload.dimensions:
            writer.write_i32(dim)
        writer.write_bytes(payload.data.tobytes())
    else:
        writer.write_u8(int(payload.code))
        raw = encode_scalar(payload.code, payload.value)
        if payload.code is TypeCode.STRING:
            if len(raw) >= 2**31:
                raise EncodeError(f"String value of field '{field.name}' is too long")
            writer.write_prefixed(raw)
        else:
            writer.write_bytes(raw)


def encode_field(field: Field) -> bytes:
    """Encode one field to bytes.

    Args:
        field: Field to encode

    Returns:
        Wire bytes of the field

    Raises:
        EncodeError: If the value does not fit its type code
    """
    writer = ByteWriter()
    write_field(writer, field)
    return writer.to_bytes()
