"""Property-based tests using hypothesis."""

from __future__ import annotations

import math

from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.extra import numpy as hnp

from dmapcodec import (
    Array,
    CodecConfig,
    Field,
    Record,
    Scalar,
    TruncatedRecord,
    TypeCode,
    decode_parallel,
    decode_record,
    encode_record,
    iter_records,
    scan,
)
from dmapcodec.types import dtype_of

_INT_RANGES = {
    TypeCode.CHAR: (-(2**7), 2**7 - 1),
    TypeCode.SHORT: (-(2**15), 2**15 - 1),
    TypeCode.INT: (-(2**31), 2**31 - 1),
    TypeCode.LONG: (-(2**63), 2**63 - 1),
    TypeCode.UCHAR: (0, 2**8 - 1),
    TypeCode.USHORT: (0, 2**16 - 1),
    TypeCode.UINT: (0, 2**32 - 1),
    TypeCode.ULONG: (0, 2**64 - 1),
}

_ARRAY_CODES = [*_INT_RANGES, TypeCode.FLOAT, TypeCode.DOUBLE]


def _int_scalar(code: TypeCode) -> st.SearchStrategy[Scalar]:
    low, high = _INT_RANGES[code]
    return st.integers(min_value=low, max_value=high).map(lambda v: Scalar(code, v))


scalars = st.one_of(
    *[_int_scalar(code) for code in _INT_RANGES],
    st.floats(width=32, allow_nan=False).map(lambda v: Scalar(TypeCode.FLOAT, v)),
    st.floats(allow_nan=False).map(lambda v: Scalar(TypeCode.DOUBLE, v)),
    st.text(max_size=20).map(lambda v: Scalar(TypeCode.STRING, v)),
)


def _array(code: TypeCode) -> st.SearchStrategy[Array]:
    shapes = hnp.array_shapes(min_dims=1, max_dims=3, min_side=1, max_side=4)
    return hnp.arrays(dtype_of(code), shapes).map(lambda a: Array(code, a.shape, a))


arrays = st.sampled_from(_ARRAY_CODES).flatmap(_array)

records = st.dictionaries(
    keys=st.text(min_size=1, max_size=16),
    values=st.one_of(scalars, arrays),
    max_size=8,
).map(lambda fields: Record([Field(name, payload) for name, payload in fields.items()]))


class TestRecordProperties:
    """Property-based tests for the record codec."""

    @settings(max_examples=75)
    @given(record=records)
    def test_round_trip(self, record: Record) -> None:
        """Test decode(encode(r)) == r, including field order."""
        data = encode_record(record)
        decoded, length = decode_record(data)

        assert decoded == record
        assert list(decoded) == list(record)
        assert length == len(data) == record.header.size

    @settings(max_examples=75)
    @given(record=records)
    def test_array_invariant(self, record: Record) -> None:
        """Test every decoded array holds product(dimensions) elements."""
        decoded, _length = decode_record(encode_record(record))

        for field in decoded.values():
            if field.is_array:
                assert math.prod(field.payload.dimensions) == field.payload.data.size

    @settings(max_examples=75)
    @given(record=records)
    def test_encode_deterministic(self, record: Record) -> None:
        """Test encoding depends only on the record's content."""
        copy = Record(record.values(), code=record.code)

        assert encode_record(record) == encode_record(copy)


class TestStreamProperties:
    """Property-based tests for scanning and parallel decoding."""

    @settings(max_examples=40)
    @given(batch=st.lists(records, max_size=12))
    def test_parallel_matches_sequential(self, batch: list[Record]) -> None:
        """Test the worker pool and a sequential walk give the same records."""
        data = b"".join(encode_record(record) for record in batch)
        config = CodecConfig(parallel_threshold=1, max_workers=4)

        outcomes = decode_parallel(data, scan(data), config)

        assert [outcome.record for outcome in outcomes] == list(iter_records(data)) == batch

    @settings(max_examples=40)
    @given(batch=st.lists(records, min_size=1, max_size=6), cut=st.integers(min_value=1))
    def test_truncation_keeps_complete_records(self, batch: list[Record], cut: int) -> None:
        """Test the partial index covers exactly the complete records."""
        data = b"".join(encode_record(record) for record in batch)
        cut = cut % len(data) or 1
        truncated = data[:-cut]

        ends = []
        position = 0
        for record in batch:
            position += record.header.size
            ends.append(position)
        complete = sum(1 for end in ends if end <= len(truncated))

        try:
            index = scan(truncated)
        except TruncatedRecord as e:
            index = e.partial_index
        assert len(index) == complete
