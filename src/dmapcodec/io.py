"""Reading and writing DMAP files.

This module ties the codec together: sources are loaded (and decompressed),
indexed, decoded in parallel and validated against a schema; records are
validated, encoded and written back out.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Optional, Union

from .codec.record import encode_record
from .compression import Source, compress, is_bz2_path, load
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import EncodeError, ValidationError
from .models.record import Record
from .schemas.tables import FormatSchema
from .schemas.validator import SchemaLike, TypedRecord, coerce, get_schema, validate
from .stream.parallel import decode_records, decode_until_corrupt
from .stream.scanner import scan

logger = logging.getLogger(__name__)

Destination = Union[str, os.PathLike, BinaryIO]
RecordLike = Union[Record, TypedRecord, Mapping[str, Any]]


def read_records(
    source: Source,
    schema: SchemaLike = FormatSchema.GENERIC,
    config: Optional[CodecConfig] = None,
) -> list[Record]:
    """Read and validate every record of a DMAP source.

    Args:
        source: Path, bytes-like object or binary file; bzip2 data is decompressed
        schema: Format every record must satisfy
        config: Decode settings

    Returns:
        Records in file order

    Raises:
        DecodeError: If any record is structurally invalid (the earliest one is reported)
        ValidationError: If a record does not satisfy ``schema``
        UnsupportedSchema: If the schema name is unknown

    Example:
        >>> records = read_records("20240101.rawacf.bz2", "rawacf")
        >>> records[0]["stid"].value
        65
    """
    table = get_schema(schema)
    data = load(source)
    records = decode_records(data, scan(data), config)
    for record in records:
        validate(record, table.schema)
    logger.debug("Read %d %s records", len(records), table.schema.name)
    return records


def read_records_lax(
    source: Source,
    schema: SchemaLike = FormatSchema.GENERIC,
    config: Optional[CodecConfig] = None,
) -> tuple[list[Record], Optional[int]]:
    """Read records up to the first corrupt or non-conforming one.

    Args:
        source: Path, bytes-like object or binary file
        schema: Format every record must satisfy
        config: Decode settings (``strict`` is ignored)

    Returns:
        Tuple of (records before the first bad one, byte offset of the bad
        record or None when the whole source is clean)
    """
    table = get_schema(schema)
    data = load(source)
    decoded, bad_offset = decode_until_corrupt(data, config)

    records: list[Record] = []
    for outcome in decoded:
        try:
            validate(outcome.record, table.schema)
        except ValidationError as e:
            logger.warning(
                "Record at byte %d is not valid %s: %s", outcome.offset, table.schema.name, e
            )
            bad_offset = outcome.offset
            break
        records.append(outcome.record)
    else:
        if bad_offset is not None:
            logger.warning("Stopped reading at byte %d", bad_offset)
    return records, bad_offset


def _prepare(item: RecordLike, schema: FormatSchema) -> Record:
    if isinstance(item, TypedRecord):
        record = item.record
    elif isinstance(item, Record):
        record = item
    elif isinstance(item, Mapping):
        record = coerce(Record.from_dict(item), schema)
    else:
        raise EncodeError(f"cannot write {type(item).__name__} as a record")
    validate(record, schema)
    return record


def encode_records(records: Iterable[Record]) -> bytes:
    """Encode records back to back into one stream."""
    return b"".join(encode_record(record) for record in records)


def write_records(
    records: Iterable[RecordLike],
    destination: Destination,
    schema: SchemaLike = FormatSchema.GENERIC,
    append: bool = False,
    config: Optional[CodecConfig] = None,
) -> int:
    """Validate, encode and write records.

    Plain mappings are converted with ``Record.from_dict`` and coerced to the
    schema's field types before validation. Paths ending in ``.bz2`` are
    written bzip2-compressed.

    Args:
        records: Records, validated records or ``{name: value}`` mappings
        destination: Path or binary file
        schema: Format every record must satisfy
        append: Add to an existing file instead of replacing it
        config: Supplies the bzip2 compression level

    Returns:
        Number of bytes written

    Raises:
        ValidationError: If a record does not satisfy ``schema``; nothing is written
        EncodeError: If a value does not fit its type code
    """
    table = get_schema(schema)
    config = config or DEFAULT_CONFIG
    prepared = [_prepare(item, table.schema) for item in records]
    data = encode_records(prepared)

    if isinstance(destination, (str, os.PathLike)):
        if is_bz2_path(destination):
            data = compress(data, config.compresslevel)
        with open(Path(destination), "ab" if append else "wb") as f:
            f.write(data)
    else:
        destination.write(data)
    logger.debug("Wrote %d records (%d bytes)", len(prepared), len(data))
    return len(data)
