"""Binary codec for DMAP fields and records."""

from __future__ import annotations

from .cursor import ByteCursor, ByteWriter
from .fields import decode_field, encode_field
from .record import check_header, decode_record, encode_record, peek_header

__all__ = [
    "ByteCursor",
    "ByteWriter",
    "check_header",
    "decode_field",
    "decode_record",
    "encode_field",
    "encode_record",
    "peek_header",
]
