"""File inspection CLI command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..compression import load
from ..models.record import Record
from ..schemas.validator import find_violations, get_schema
from ..stream.parallel import decode_records, decode_until_corrupt
from ..stream.scanner import scan
from ..utils.sizing import field_sizes


def _read(data: bytes, lax: bool) -> tuple[list[Record], list[int], Optional[int]]:
    """Decode records, returning (records, their offsets, offset where reading stopped)."""
    if not lax:
        index = scan(data)
        return decode_records(data, index), [entry.offset for entry in index], None

    decoded, bad_offset = decode_until_corrupt(data)
    return (
        [outcome.record for outcome in decoded],
        [outcome.offset for outcome in decoded],
        bad_offset,
    )


def inspect_file(
    file_path: Path, schema: Optional[str] = None, lax: bool = False, show_fields: bool = False
) -> bool:
    """Print a summary of the records in a DMAP file.

    Args:
        file_path: DMAP file, optionally bzip2-compressed
        schema: Format name to validate every record against
        lax: Report records up to the first corrupt one instead of failing
        show_fields: Also print the field breakdown of the first record

    Returns:
        True if every record was read (and, with ``schema``, is valid)

    Raises:
        DecodeError: If a record is corrupt and ``lax`` is False
        UnsupportedSchema: If the schema name is unknown
    """
    table = get_schema(schema) if schema is not None else None
    data = load(file_path)
    records, offsets, bad_offset = _read(data, lax)

    print("|" * 7, "dmapcodec: DMAP Binary Codec", "|" * 7)
    print(f"File: {file_path}")
    print(f"{len(records)} record{'s' if len(records) != 1 else ''} in {len(data)} bytes.")
    print()

    print(f"{'record':>8} {'offset':>10} {'size':>8} {'scalars':>8} {'arrays':>8}")
    for i, (offset, record) in enumerate(zip(offsets, records)):
        header = record.header
        print(
            f"{i:>8} {offset:>10} {header.size:>8} "
            f"{header.scalar_count:>8} {header.array_count:>8}"
        )
    print()

    if show_fields and records:
        first = records[0]
        print(f"{'-' * 22} Fields of record 0 {'-' * 22}")
        for i, (name, size) in enumerate(field_sizes(first).items(), 1):
            field_desc = f"{i}. {name} {first[name].describe()}"
            dots = "." * max(1, 54 - len(field_desc) - len(str(size)) - len(" bytes"))
            print(f"        {field_desc}{dots}{size} bytes")
        print()

    ok = bad_offset is None
    if bad_offset is not None:
        print(f"Stopped at corrupt data at byte {bad_offset}")

    if table is not None:
        invalid = 0
        for i, (offset, record) in enumerate(zip(offsets, records)):
            violations = find_violations(record, table.schema)
            if violations:
                invalid += 1
                print(f"  record {i} (byte {offset}): {violations[0]}")
        print(f"{table.schema.name}: {len(records) - invalid}/{len(records)} records valid")
        ok = ok and invalid == 0

    return ok
