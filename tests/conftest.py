"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Callable

import numpy as np
import pytest

from dmapcodec import Field, Record, TypeCode, encode_record
from dmapcodec.schemas import SCHEMAS, FormatSchema
from dmapcodec.types import dtype_of


def _schema_record(schema: FormatSchema, include_optional: bool = False) -> Record:
    table = SCHEMAS[schema]
    specs = table.required + (table.optional if include_optional else ())
    fields = []
    for spec in specs:
        if not spec.is_array:
            value = "text" if spec.code is TypeCode.STRING else 1
            fields.append(Field.scalar(spec.name, spec.code, value))
        else:
            shape = (3,) * (spec.rank or 1)
            values = np.ones(shape, dtype=dtype_of(spec.code))
            fields.append(Field.array(spec.name, spec.code, values))
    return Record(fields)


@pytest.fixture
def schema_record() -> Callable[..., Record]:
    """Factory building a record that satisfies a schema table."""
    return _schema_record


@pytest.fixture
def sample_record() -> Record:
    """Record with one int8 scalar and one float32 array."""
    return Record(
        [
            Field.scalar("radar.revision.major", TypeCode.CHAR, 4),
            Field.array("pwr0", TypeCode.FLOAT, [1.0, 2.0, 3.0]),
        ]
    )


@pytest.fixture
def mixed_record() -> Record:
    """Record covering every payload kind."""
    return Record(
        [
            Field.scalar("stid", TypeCode.SHORT, 65),
            Field.scalar("origin.time", TypeCode.STRING, "Mon Jan  1 00:00:00 2024"),
            Field.scalar("noise.mean", TypeCode.FLOAT, 1.5),
            Field.scalar("time.us", TypeCode.INT, -3),
            Field.scalar("counter", TypeCode.ULONG, 2**63),
            Field.scalar("chi.sqr", TypeCode.DOUBLE, 0.25),
            Field.array("slist", TypeCode.SHORT, np.arange(5, dtype=np.int16)),
            Field.array("acfd", TypeCode.FLOAT, np.arange(12, dtype=np.float32).reshape(2, 3, 2)),
            Field.array("qflg", TypeCode.CHAR, [1, 0, -1]),
        ]
    )


@pytest.fixture
def stream_records() -> list[Record]:
    """Five small records of different lengths."""
    return [
        Record(
            [
                Field.scalar("stid", TypeCode.SHORT, i),
                Field.array("slist", TypeCode.SHORT, np.arange(i + 1, dtype=np.int16)),
            ]
        )
        for i in range(5)
    ]


@pytest.fixture
def stream_bytes(stream_records: list[Record]) -> bytes:
    """Concatenated encoding of ``stream_records``."""
    return b"".join(encode_record(record) for record in stream_records)
