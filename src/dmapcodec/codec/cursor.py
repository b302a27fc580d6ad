"""Byte-level reading and writing utilities.

This module provides a read cursor over a shared, read-only buffer and a
private write buffer for encoding. All multi-byte integers are little-endian.
"""

from __future__ import annotations

import struct

import numpy as np

from ..exceptions import UnexpectedEof

_I32 = struct.Struct("<i")
_U8 = struct.Struct("<B")


class ByteWriter:
    """Appends DMAP primitives to a private byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_i32(5)
        >>> writer.write_bytes(b"stid0")
        >>> data = writer.to_bytes()
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def write_u8(self, value: int) -> None:
        """Write one unsigned byte.

        Raises:
            struct.error: If value is outside 0-255
        """
        self._buffer += _U8.pack(value)

    def write_i32(self, value: int) -> None:
        """Write a 4-byte signed integer.

        Raises:
            struct.error: If value does not fit in 32 bits
        """
        self._buffer += _I32.pack(value)

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        self._buffer += data

    def write_prefixed(self, data: bytes) -> None:
        """Write a 4-byte length followed by the bytes themselves."""
        self.write_i32(len(data))
        self._buffer += data

    def __len__(self) -> int:
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        return bytes(self._buffer)


class ByteCursor:
    """Reads DMAP primitives from a read-only view of a shared buffer.

    The cursor never copies the underlying buffer; several cursors may read
    the same buffer concurrently since each keeps its own position. Positions
    are absolute offsets into the buffer, so error messages point at the
    exact byte in the source.

    Example:
        >>> cursor = ByteCursor(data, offset=16)
        >>> length = cursor.read_i32()
        >>> name = cursor.read_bytes(length)
    """

    def __init__(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        """Initialize a cursor.

        Args:
            data: Buffer to read from
            offset: Absolute position of the first byte to read
        """
        view = data if isinstance(data, memoryview) else memoryview(data)
        self._view = view.cast("B") if view.format != "B" or view.ndim != 1 else view
        if offset < 0 or offset > len(self._view):
            raise UnexpectedEof(offset, 0, max(0, len(self._view) - offset), "start offset")
        self._position = offset

    @property
    def position(self) -> int:
        """Current absolute read position in bytes."""
        return self._position

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._view) - self._position

    def _take(self, count: int, what: str) -> memoryview:
        if count > self.remaining():
            raise UnexpectedEof(self._position, count, self.remaining(), what)
        start = self._position
        self._position += count
        return self._view[start : self._position]

    def read_u8(self, what: str = "byte") -> int:
        return self._take(1, what)[0]

    def read_i32(self, what: str = "integer") -> int:
        return _I32.unpack(self._take(4, what))[0]

    def read_bytes(self, count: int, what: str = "bytes") -> memoryview:
        """Read ``count`` bytes as a zero-copy view.

        Raises:
            UnexpectedEof: If not enough bytes are available
        """
        return self._take(count, what)

    def read_array(self, dtype: np.dtype, count: int, what: str = "array data") -> np.ndarray:
        """Read ``count`` elements of ``dtype`` as a read-only view of the buffer.

        The view borrows the shared buffer; Array takes its own copy.

        Raises:
            UnexpectedEof: If not enough bytes are available
        """
        raw = self._take(count * dtype.itemsize, what)
        return np.frombuffer(raw, dtype=dtype, count=count)
