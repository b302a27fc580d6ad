"""Record size calculation utilities.

This module provides functions to calculate the encoded size of fields and
records without actually encoding them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from ..types import HEADER_SIZE, TypeCode, sizeof

if TYPE_CHECKING:
    from ..models.field import Field
    from ..models.record import Record

# 4-byte name length plus 1-byte type code.
_FIELD_OVERHEAD = 5


def field_size(field: Field) -> int:
    """Calculate the encoded size of one field in bytes.

    Args:
        field: Field to measure

    Returns:
        Size in bytes, including name, type code and payload

    Example:
        >>> field_size(Field.scalar("stid", TypeCode.SHORT, 65))
        11  # 4 + 4 ("stid") + 1 + 2
    """
    size = _FIELD_OVERHEAD + len(field.name.encode("utf-8"))
    payload = field.payload
    if field.is_array:
        # dimension count byte, 4 bytes per dimension, then the elements
        size += 1 + 4 * len(payload.dimensions) + payload.data.size * sizeof(payload.code)
    elif payload.code is TypeCode.STRING:
        size += 4 + len(payload.value.encode("utf-8"))
    else:
        size += sizeof(payload.code)
    return size


def body_size(fields: Iterable[Field]) -> int:
    return sum(field_size(field) for field in fields)


def encoded_size(record: Record) -> int:
    """Calculate the encoded size of a record in bytes.

    The result always equals the length written into the record header.

    Args:
        record: Record to measure

    Returns:
        Header size plus the size of every field

    Example:
        >>> encoded_size(Record([Field.scalar("stid", TypeCode.SHORT, 65)]))
        27  # 16-byte header + 11-byte field
    """
    return HEADER_SIZE + body_size(record.values())


def field_sizes(record: Record) -> dict[str, int]:
    """Get the size in bytes of each field in a record.

    Args:
        record: Record to analyze

    Returns:
        Dictionary mapping field names to their encoded size, in record order
    """
    return {name: field_size(field) for name, field in record.items()}
