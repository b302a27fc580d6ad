"""Stream scanner.

Walks a buffer of concatenated records using only each record's declared
length, producing an index of record boundaries. Fields are not decoded
while indexing, so a later pass can decode the records in any order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, Optional, overload

from ..codec.record import check_header, decode_record, peek_header
from ..compression import Source, load
from ..exceptions import InvalidHeader, TruncatedRecord
from ..models.record import Record
from ..types import HEADER_SIZE

if TYPE_CHECKING:
    from ..config import CodecConfig

logger = logging.getLogger(__name__)

Buffer = bytes | bytearray | memoryview


@dataclass(frozen=True)
class IndexEntry:
    """Location of one record in its source buffer."""

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


def _walk(buffer: Buffer) -> Iterator[IndexEntry]:
    found: list[IndexEntry] = []
    total = len(buffer)
    offset = 0
    while offset < total:
        available = total - offset
        if available < HEADER_SIZE:
            raise TruncatedRecord(offset, None, available, found)
        header = peek_header(buffer, offset)
        try:
            check_header(header, offset)
        except InvalidHeader as e:
            e.partial_index = list(found)
            raise
        if header.size > available:
            raise TruncatedRecord(offset, header.size, available, found)
        entry = IndexEntry(offset, header.size)
        found.append(entry)
        yield entry
        offset = entry.end


def scan(buffer: Buffer) -> list[IndexEntry]:
    """Index every record boundary in ``buffer``.

    Only headers are read. Indexing stops at the first record that runs
    past the end of the buffer.

    Args:
        buffer: Concatenated records

    Returns:
        One IndexEntry per record, in byte order

    Raises:
        TruncatedRecord: If a record extends past the end of the buffer;
            ``partial_index`` holds the entries found before it
        InvalidHeader: If a header declares a length shorter than itself or
            a negative field count; ``partial_index`` holds the entries
            found before it

    Example:
        >>> index = scan(data)
        >>> [(entry.offset, entry.length) for entry in index]
        [(0, 68), (68, 68)]
    """
    view = memoryview(buffer)
    index = list(_walk(view))
    logger.debug("Indexed %d records in %d bytes", len(index), len(view))
    return index


def iter_records(buffer: Buffer) -> Iterator[Record]:
    """Decode records one at a time while walking the buffer.

    Records are yielded as soon as they are decoded, so everything before a
    corrupt record is delivered before the error is raised.

    Raises:
        TruncatedRecord: If a record extends past the end of the buffer
        DecodeError: If a record is structurally invalid
    """
    view = memoryview(buffer)
    for entry in _walk(view):
        record, _length = decode_record(view, entry.offset)
        yield record


class RecordStream(Sequence[Record]):
    """Ordered, lazily decoded records of one source.

    The stream keeps the source buffer and its boundary index. Records are
    decoded on access and never cached, so each access returns a fresh
    Record owned by the caller.

    Example:
        >>> stream = RecordStream.from_file("20240101.rawacf")
        >>> len(stream)
        75
        >>> first = stream[0]
        >>> records = stream.decode_all()
    """

    def __init__(self, buffer: Buffer, index: Optional[Sequence[IndexEntry]] = None) -> None:
        """Initialize a stream.

        Args:
            buffer: Concatenated records
            index: Precomputed boundary index; scanned from ``buffer`` if omitted
        """
        self._buffer = memoryview(buffer).toreadonly()
        self._index = tuple(index) if index is not None else tuple(scan(self._buffer))

    @classmethod
    def from_buffer(cls, buffer: Buffer) -> RecordStream:
        return cls(buffer)

    @classmethod
    def from_file(cls, source: Source) -> RecordStream:
        """Open a path or binary file, decompressing bzip2 input."""
        return cls(load(source))

    @property
    def buffer(self) -> memoryview:
        return self._buffer

    @property
    def index(self) -> tuple[IndexEntry, ...]:
        return self._index

    def __len__(self) -> int:
        return len(self._index)

    @overload
    def __getitem__(self, position: int) -> Record: ...

    @overload
    def __getitem__(self, position: slice) -> list[Record]: ...

    def __getitem__(self, position: int | slice) -> Record | list[Record]:
        if isinstance(position, slice):
            return [self._decode(entry) for entry in self._index[position]]
        return self._decode(self._index[position])

    def __iter__(self) -> Iterator[Record]:
        for entry in self._index:
            yield self._decode(entry)

    def _decode(self, entry: IndexEntry) -> Record:
        record, _length = decode_record(self._buffer, entry.offset)
        return record

    def decode_all(self, config: Optional[CodecConfig] = None) -> list[Record]:
        """Decode every record through the parallel driver.

        Raises:
            DecodeError: The error of the earliest corrupt record
        """
        # Import here to avoid circular dependency
        from .parallel import decode_records

        return decode_records(self._buffer, self._index, config=config)


def scan_lax(buffer: Buffer) -> tuple[list[IndexEntry], Optional[int]]:
    """Index records up to the first broken header.

    Returns:
        Tuple of (entries before the break, byte offset of the break or None)
    """
    index: list[IndexEntry] = []
    try:
        for entry in _walk(memoryview(buffer)):
            index.append(entry)
    except (TruncatedRecord, InvalidHeader) as e:
        logger.debug("Indexing stopped at byte %d: %s", e.offset, e)
        return index, e.offset
    return index, None
