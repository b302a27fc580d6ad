#!/usr/bin/env python3
"""Basic usage example for dmapcodec.

This example demonstrates:
1. Building a record field by field
2. Encoding it to DMAP bytes
3. Decoding it back and checking the round trip
4. Writing and reading a compressed file with schema validation
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import numpy as np

from dmapcodec import (
    FormatSchema,
    RecordBuilder,
    TypeCode,
    decode_record,
    encode_record,
    field_sizes,
    find_violations,
    read_records,
    write_records,
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("dmapcodec Basic Usage Example")
    print("=" * 60)
    print()

    # Build a record
    print("1. Building a record...")
    record = (
        RecordBuilder()
        .scalar("radar.revision.major", TypeCode.CHAR, 4)
        .scalar("stid", TypeCode.SHORT, 65)
        .scalar("combf", TypeCode.STRING, "normalscan")
        .array("pwr0", TypeCode.FLOAT, np.linspace(0.0, 1.0, 5, dtype=np.float32))
        .array("ltab", TypeCode.SHORT, np.zeros((3, 2), np.int16))
        .build()
    )
    for name, field in record.items():
        print(f"   {name}: {field.describe()}")
    print()

    # Field sizes
    print("2. Field sizes...")
    for name, size in field_sizes(record).items():
        print(f"   {name}: {size} bytes")
    print(f"   Total: {record.header.size} bytes (16-byte header included)")
    print()

    # Encode
    print("3. Encoding...")
    data = encode_record(record)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Header: {data[:16].hex()}")
    print()

    # Decode
    print("4. Decoding...")
    decoded, length = decode_record(data)
    print(f"   Consumed {length} bytes, round trip {'OK' if decoded == record else 'FAILED'}")
    print()

    # Validate
    print("5. Validating against RAWACF...")
    violations = find_violations(decoded, FormatSchema.RAWACF)
    print(f"   {len(violations)} violations, first: {violations[0]}")
    print(f"   GENERIC violations: {len(find_violations(decoded, FormatSchema.GENERIC))}")
    print()

    # Files
    print("6. Writing and reading a compressed file...")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "example.dmap.bz2"
        written = write_records([record, record], path)
        loaded = read_records(path)
        print(f"   Wrote {written} compressed bytes, read {len(loaded)} records")
    print()


if __name__ == "__main__":
    main()
