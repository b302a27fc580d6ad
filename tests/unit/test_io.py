"""Unit tests for file reading and writing."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from dmapcodec import (
    EncodeError,
    FormatSchema,
    MissingField,
    Record,
    TruncatedRecord,
    TypeCode,
    encode_record,
    encode_records,
    read_records,
    read_records_lax,
    validate,
    write_records,
)
from dmapcodec.types import HEADER_SIZE

RecordFactory = Callable[..., Record]


class TestReadWrite:
    """Test round trips through files."""

    def test_file_round_trip(self, tmp_path: Path, stream_records: list[Record]) -> None:
        """Test writing then reading a plain file."""
        path = tmp_path / "out.dmap"

        written = write_records(stream_records, path)

        assert written == path.stat().st_size
        assert read_records(path) == stream_records

    def test_bz2_round_trip(self, tmp_path: Path, stream_records: list[Record]) -> None:
        """Test .bz2 paths are compressed on write and decompressed on read."""
        path = tmp_path / "out.dmap.bz2"

        write_records(stream_records, path)

        assert path.read_bytes().startswith(b"BZh")
        assert read_records(path) == stream_records

    def test_read_from_bytes_and_file_object(self, stream_records: list[Record]) -> None:
        """Test bytes and binary file sources."""
        data = encode_records(stream_records)

        assert read_records(data) == stream_records
        assert read_records(io.BytesIO(data)) == stream_records

    def test_write_to_file_object(self, stream_records: list[Record]) -> None:
        """Test writing to a binary stream."""
        buffer = io.BytesIO()

        write_records(stream_records, buffer)

        assert buffer.getvalue() == encode_records(stream_records)

    def test_append(self, tmp_path: Path, stream_records: list[Record]) -> None:
        """Test appending to an existing file."""
        path = tmp_path / "out.dmap"
        write_records(stream_records[:2], path)

        write_records(stream_records[2:], path, append=True)

        assert read_records(path) == stream_records

    def test_overwrite_by_default(self, tmp_path: Path, stream_records: list[Record]) -> None:
        """Test writing replaces existing content."""
        path = tmp_path / "out.dmap"
        write_records(stream_records, path)

        write_records(stream_records[:1], path)

        assert read_records(path) == stream_records[:1]

    def test_encode_records(self, stream_records: list[Record]) -> None:
        """Test stream bytes are the records back to back."""
        assert encode_records(stream_records) == b"".join(
            encode_record(record) for record in stream_records
        )


class TestSchemas:
    """Test schema handling on read and write."""

    def test_read_with_schema(self, tmp_path: Path, schema_record: RecordFactory) -> None:
        """Test reading records that satisfy a schema."""
        path = tmp_path / "data.rawacf"
        records = [schema_record(FormatSchema.RAWACF) for _ in range(3)]
        write_records(records, path, FormatSchema.RAWACF)

        assert read_records(path, "rawacf") == records

    def test_read_rejects_nonconforming(self, stream_records: list[Record]) -> None:
        """Test a schema violation while reading."""
        with pytest.raises(MissingField):
            read_records(encode_records(stream_records), FormatSchema.RAWACF)

    def test_write_rejects_nonconforming(
        self, tmp_path: Path, stream_records: list[Record]
    ) -> None:
        """Test nothing is written when a record is invalid."""
        path = tmp_path / "data.rawacf"

        with pytest.raises(MissingField):
            write_records(stream_records, path, FormatSchema.RAWACF)

        assert not path.exists()

    def test_write_mappings(self, tmp_path: Path, schema_record: RecordFactory) -> None:
        """Test plain mappings are coerced to the schema types."""
        path = tmp_path / "data.fitacf"
        values = schema_record(FormatSchema.FITACF).to_dict()

        write_records([values], path, FormatSchema.FITACF)
        (record,) = read_records(path, FormatSchema.FITACF)

        assert record["stid"].code is TypeCode.SHORT
        assert record["noise.sky"].code is TypeCode.FLOAT
        assert validate(record, FormatSchema.FITACF).schema is FormatSchema.FITACF

    def test_write_generic_mapping(self) -> None:
        """Test GENERIC keeps inferred types."""
        buffer = io.BytesIO()

        write_records([{"count": 5, "pwr0": np.zeros(3, np.float32)}], buffer)
        (record,) = read_records(buffer.getvalue())

        assert record["count"].code is TypeCode.INT
        assert record["pwr0"].code is TypeCode.FLOAT

    def test_write_rejects_other_objects(self) -> None:
        """Test unsupported record objects."""
        with pytest.raises(EncodeError):
            write_records([42], io.BytesIO())  # type: ignore[list-item]


class TestLaxRead:
    """Test reading up to the first corrupt record."""

    def test_clean_source(self, stream_records: list[Record]) -> None:
        """Test a clean source reports no break."""
        records, bad_offset = read_records_lax(encode_records(stream_records))

        assert records == stream_records
        assert bad_offset is None

    def test_corrupt_record(self, stream_records: list[Record]) -> None:
        """Test records after a corrupt one are dropped."""
        data = bytearray(encode_records(stream_records))
        offset = sum(len(encode_record(record)) for record in stream_records[:3])
        data[offset + HEADER_SIZE + 4 + len("stid")] = 0x05

        records, bad_offset = read_records_lax(bytes(data))

        assert records == stream_records[:3]
        assert bad_offset == offset

    def test_truncated_tail(self, stream_records: list[Record]) -> None:
        """Test a truncated last record."""
        data = encode_records(stream_records)
        last = len(data) - len(encode_record(stream_records[-1]))

        records, bad_offset = read_records_lax(data[:-3])

        assert records == stream_records[:-1]
        assert bad_offset == last

    def test_strict_read_of_truncated_tail(self, stream_records: list[Record]) -> None:
        """Test the strict reader raises instead."""
        with pytest.raises(TruncatedRecord):
            read_records(encode_records(stream_records)[:-3])

    def test_schema_violation_stops(
        self, schema_record: RecordFactory, stream_records: list[Record]
    ) -> None:
        """Test a non-conforming record ends a lax read."""
        good = schema_record(FormatSchema.SND)
        data = encode_records([good, good, stream_records[0]])

        records, bad_offset = read_records_lax(data, FormatSchema.SND)

        assert records == [good, good]
        assert bad_offset == 2 * len(encode_record(good))
