"""Loading raw DMAP bytes from files, buffers and bzip2 streams."""

from __future__ import annotations

import bz2
import logging
import os
from pathlib import Path
from typing import BinaryIO, Union

from .exceptions import DecodeError

logger = logging.getLogger(__name__)

BZ2_MAGIC = b"BZh"

Source = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO]


def is_bz2_path(path: str | os.PathLike) -> bool:
    return Path(path).suffix.lower() == ".bz2"


def decompress(data: bytes) -> bytes:
    """Return ``data`` decompressed if it is a bzip2 stream, else unchanged.

    Raises:
        DecodeError: If the data carries the bzip2 magic but does not decompress
    """
    if not data.startswith(BZ2_MAGIC):
        return data
    try:
        raw = bz2.decompress(data)
    except (OSError, ValueError, EOFError) as e:
        raise DecodeError(f"Corrupt bzip2 stream: {e}") from e
    logger.debug("Decompressed %d bzip2 bytes to %d", len(data), len(raw))
    return raw


def load(source: Source) -> bytes:
    """Read all bytes from a path, bytes-like object or binary file.

    bzip2 input, recognized by its magic bytes, is decompressed.

    Args:
        source: Path, bytes-like object, or file opened in binary mode

    Returns:
        The uncompressed DMAP byte stream

    Raises:
        FileNotFoundError: If a path does not exist
        DecodeError: If a bzip2 stream is corrupt
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    elif isinstance(source, (str, os.PathLike)):
        data = Path(source).read_bytes()
        logger.debug("Read %d bytes from %s", len(data), source)
    else:
        data = source.read()
    return decompress(data)


def compress(data: bytes, compresslevel: int = 9) -> bytes:
    return bz2.compress(data, compresslevel=compresslevel)
