"""In-memory DMAP value types.

This module provides the Field and Record types produced by decoding and
consumed by encoding, plus a builder for assembling records by hand.
"""

from __future__ import annotations

from .field import Array, Field, Payload, Scalar, check_dimensions
from .record import Record, RecordBuilder, RecordHeader

__all__ = [
    "Array",
    "Field",
    "Payload",
    "Record",
    "RecordBuilder",
    "RecordHeader",
    "Scalar",
    "check_dimensions",
]
