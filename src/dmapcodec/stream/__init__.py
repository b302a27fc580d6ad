"""Record boundary scanning and parallel decoding."""

from __future__ import annotations

from .parallel import DecodeOutcome, decode_parallel, decode_records, decode_until_corrupt
from .scanner import IndexEntry, RecordStream, iter_records, scan, scan_lax

__all__ = [
    "DecodeOutcome",
    "IndexEntry",
    "RecordStream",
    "decode_parallel",
    "decode_records",
    "decode_until_corrupt",
    "iter_records",
    "scan",
    "scan_lax",
]
