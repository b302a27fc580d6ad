"""Unit tests for size accounting."""

from __future__ import annotations

import numpy as np

from dmapcodec import (
    Field,
    Record,
    TypeCode,
    encode_field,
    encode_record,
    encoded_size,
    field_sizes,
)
from dmapcodec.utils import body_size, field_size


class TestSizing:
    """Test sizes computed without encoding."""

    def test_scalar_field(self) -> None:
        """Test a fixed-width scalar."""
        field = Field.scalar("stid", TypeCode.SHORT, 65)

        assert field_size(field) == 11

    def test_string_field(self) -> None:
        """Test strings count their UTF-8 bytes and length prefix."""
        field = Field.scalar("combf", TypeCode.STRING, "é")

        assert field_size(field) == 4 + 5 + 1 + 4 + 2
        assert field_size(field) == len(encode_field(field))

    def test_array_field(self) -> None:
        """Test arrays count dimensions and elements."""
        field = Field.array("acfd", TypeCode.FLOAT, np.zeros((2, 3, 2), np.float32))

        assert field_size(field) == 4 + 4 + 1 + 1 + 3 * 4 + 12 * 4
        assert field_size(field) == len(encode_field(field))

    def test_encoded_size_matches_encoding(self, mixed_record: Record) -> None:
        """Test the computed size equals the encoded length."""
        assert encoded_size(mixed_record) == len(encode_record(mixed_record))

    def test_empty_record(self) -> None:
        """Test a record with no fields is just a header."""
        assert encoded_size(Record()) == 16
        assert body_size([]) == 0

    def test_field_sizes(self, mixed_record: Record) -> None:
        """Test the per-field breakdown."""
        sizes = field_sizes(mixed_record)

        assert list(sizes) == list(mixed_record)
        assert sum(sizes.values()) + 16 == encoded_size(mixed_record)
