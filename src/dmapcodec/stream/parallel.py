"""Parallel decode driver.

Once a stream is indexed, records share no state, so each index entry is
decoded independently by a worker pool. All workers read the same
read-only buffer; results are returned in index order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence

from ..codec.record import decode_record
from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError
from ..models.record import Record
from .scanner import Buffer, IndexEntry, scan, scan_lax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeOutcome:
    """Result of decoding one index entry.

    Exactly one of ``record`` and ``error`` is set.
    """

    index: int
    offset: int
    record: Optional[Record] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _decode_entry(view: memoryview, position: int, entry: IndexEntry) -> DecodeOutcome:
    try:
        record, _length = decode_record(view, entry.offset)
    except DecodeError as e:
        return DecodeOutcome(position, entry.offset, error=e)
    return DecodeOutcome(position, entry.offset, record=record)


def decode_parallel(
    buffer: Buffer, index: Sequence[IndexEntry], config: Optional[CodecConfig] = None
) -> list[DecodeOutcome]:
    """Decode every indexed record, concurrently when the batch is large enough.

    Failures are captured per entry. In strict mode every decode still runs
    to completion before the error of the earliest failing entry is raised.

    Args:
        buffer: Source buffer the index was built from
        index: Record boundaries, usually from ``scan``
        config: Worker count, strictness and serial threshold

    Returns:
        One DecodeOutcome per index entry, in index order

    Raises:
        DecodeError: In strict mode, the error of the lowest-indexed failing entry

    Example:
        >>> outcomes = decode_parallel(data, scan(data), CodecConfig(strict=False))
        >>> [outcome.offset for outcome in outcomes if not outcome.ok]
        [136]
    """
    config = config or DEFAULT_CONFIG
    view = memoryview(buffer).toreadonly()
    positions = range(len(index))

    if len(index) < config.parallel_threshold or config.max_workers == 1:
        logger.debug("Decoding %d records serially", len(index))
        outcomes = [_decode_entry(view, i, entry) for i, entry in zip(positions, index)]
    else:
        logger.debug("Decoding %d records with max_workers=%s", len(index), config.max_workers)
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            outcomes = list(executor.map(_decode_entry, [view] * len(index), positions, index))

    if config.strict:
        for outcome in outcomes:
            if outcome.error is not None:
                raise outcome.error
    return outcomes


def decode_records(
    buffer: Buffer,
    index: Optional[Sequence[IndexEntry]] = None,
    config: Optional[CodecConfig] = None,
) -> list[Record]:
    """Decode all records of a buffer, raising on the first corrupt one.

    Args:
        buffer: Concatenated records
        index: Precomputed boundaries; scanned when omitted
        config: Worker settings; ``strict`` is always enforced

    Returns:
        Records in stream order
    """
    if index is None:
        index = scan(buffer)
    config = (config or DEFAULT_CONFIG).model_copy(update={"strict": True})
    outcomes = decode_parallel(buffer, index, config)
    return [outcome.record for outcome in outcomes if outcome.record is not None]


def decode_until_corrupt(
    buffer: Buffer, config: Optional[CodecConfig] = None
) -> tuple[list[DecodeOutcome], Optional[int]]:
    """Decode records up to the first one that cannot be indexed or decoded.

    Args:
        buffer: Concatenated records
        config: Worker settings; ``strict`` is ignored

    Returns:
        Tuple of (successful outcomes in stream order, byte offset of the
        first corrupt record or None when the whole buffer is clean)
    """
    index, bad_offset = scan_lax(buffer)
    config = (config or DEFAULT_CONFIG).model_copy(update={"strict": False})
    decoded: list[DecodeOutcome] = []
    for outcome in decode_parallel(buffer, index, config):
        if not outcome.ok:
            logger.warning("Corrupt record at byte %d: %s", outcome.offset, outcome.error)
            return decoded, outcome.offset
        decoded.append(outcome)
    return decoded, bad_offset
