"""dmapcodec: DMAP Binary Codec

A Python library for reading and writing DMAP, the self-describing binary
record format used for SuperDARN radar data products (IQDAT, RAWACF,
FITACF, GRID, MAP, SND).

Key Features:
- Byte-exact decode/encode of scalar and n-dimensional array fields
- Schema validation against the fixed radar formats, or none (GENERIC)
- Boundary scanning and parallel decoding of independent records
- Transparent bzip2 handling for ``.bz2`` files

Quick Start:
    >>> from dmapcodec import Record, TypeCode, Field, encode_record, decode_record
    >>>
    >>> record = Record([
    ...     Field.scalar("radar.revision.major", TypeCode.CHAR, 4),
    ...     Field.array("pwr0", TypeCode.FLOAT, [1.0, 2.0, 3.0]),
    ... ])
    >>> data = encode_record(record)
    >>> decoded, length = decode_record(data)
    >>> decoded == record
    True
    >>>
    >>> records = read_records("20240101.fitacf.bz2", "fitacf")
"""

from __future__ import annotations

from .codec import decode_field, decode_record, encode_field, encode_record, peek_header
from .config import CodecConfig
from .exceptions import (
    DecodeError,
    DmapError,
    DuplicateField,
    EncodeError,
    FieldTypeMismatch,
    InconsistentDimensions,
    InvalidDimension,
    InvalidHeader,
    MissingField,
    RecordLengthMismatch,
    TruncatedRecord,
    UnexpectedEof,
    UnknownTypeCode,
    UnsupportedSchema,
    ValidationError,
)
from .io import encode_records, read_records, read_records_lax, write_records
from .models import Array, Field, Record, RecordBuilder, RecordHeader, Scalar
from .schemas import FormatSchema, TypedRecord, coerce, find_violations, get_schema, validate
from .stream import (
    DecodeOutcome,
    IndexEntry,
    RecordStream,
    decode_parallel,
    decode_records,
    decode_until_corrupt,
    iter_records,
    scan,
)
from .types import TypeCode, sizeof
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "decode_field",
    "encode_field",
    "decode_record",
    "encode_record",
    "peek_header",
    # Values
    "TypeCode",
    "sizeof",
    "Scalar",
    "Array",
    "Field",
    "Record",
    "RecordHeader",
    "RecordBuilder",
    # Schemas
    "FormatSchema",
    "TypedRecord",
    "validate",
    "find_violations",
    "coerce",
    "get_schema",
    # Streams
    "IndexEntry",
    "RecordStream",
    "DecodeOutcome",
    "scan",
    "iter_records",
    "decode_parallel",
    "decode_records",
    "decode_until_corrupt",
    # Files
    "read_records",
    "read_records_lax",
    "write_records",
    "encode_records",
    "CodecConfig",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Exceptions
    "DmapError",
    "DecodeError",
    "EncodeError",
    "ValidationError",
    "UnknownTypeCode",
    "UnexpectedEof",
    "InvalidDimension",
    "RecordLengthMismatch",
    "DuplicateField",
    "InvalidHeader",
    "TruncatedRecord",
    "MissingField",
    "FieldTypeMismatch",
    "InconsistentDimensions",
    "UnsupportedSchema",
]
