"""Type registry for DMAP primitive values.

This module maps the one-byte DMAP type codes to element widths, struct
formats and numpy dtypes, and converts single values to and from bytes.
All values use little-endian byte order.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np

from .exceptions import DecodeError, EncodeError, UnknownTypeCode

# Bit set on the type byte of an array field; the low bits carry the element code.
ARRAY_FLAG = 0x80

# Record header: code, total length, scalar count, array count (4-byte ints).
HEADER_SIZE = 16

# Code written into the header of every record built by this package.
DMAP_CODE = 65537

ScalarValue = Union[int, float, str]


class TypeCode(enum.IntEnum):
    """DMAP primitive element types, keyed by their on-wire code.

    CHAR is the DMAP "char" type, a signed 8-bit integer.
    """

    CHAR = 1
    SHORT = 2
    INT = 3
    FLOAT = 4
    DOUBLE = 8
    STRING = 9
    LONG = 10
    UCHAR = 16
    USHORT = 17
    UINT = 18
    ULONG = 19


@dataclass(frozen=True)
class _TypeInfo:
    width: int
    fmt: Optional[struct.Struct]
    dtype: Optional[np.dtype]
    is_integer: bool


def _numeric(fmt: str, dtype: str, is_integer: bool) -> _TypeInfo:
    packer = struct.Struct("<" + fmt)
    return _TypeInfo(packer.size, packer, np.dtype("<" + dtype), is_integer)


_REGISTRY: dict[TypeCode, _TypeInfo] = {
    TypeCode.CHAR: _numeric("b", "i1", True),
    TypeCode.SHORT: _numeric("h", "i2", True),
    TypeCode.INT: _numeric("i", "i4", True),
    TypeCode.LONG: _numeric("q", "i8", True),
    TypeCode.UCHAR: _numeric("B", "u1", True),
    TypeCode.USHORT: _numeric("H", "u2", True),
    TypeCode.UINT: _numeric("I", "u4", True),
    TypeCode.ULONG: _numeric("Q", "u8", True),
    TypeCode.FLOAT: _numeric("f", "f4", False),
    TypeCode.DOUBLE: _numeric("d", "f8", False),
    TypeCode.STRING: _TypeInfo(0, None, None, False),
}

_DTYPE_TO_CODE: dict[np.dtype, TypeCode] = {
    info.dtype.newbyteorder("="): code
    for code, info in _REGISTRY.items()
    if info.dtype is not None
}


def lookup(code: int, offset: Optional[int] = None) -> TypeCode:
    """Resolve a raw type byte to a TypeCode.

    Args:
        code: Raw code value (array flag already stripped)
        offset: Byte offset of the type byte, for error context

    Returns:
        Matching TypeCode

    Raises:
        UnknownTypeCode: If the value is not a registered code
    """
    try:
        return TypeCode(code)
    except ValueError:
        raise UnknownTypeCode(code, offset) from None


def sizeof(code: TypeCode) -> int:
    """Return the element width in bytes, or 0 for the variable-width STRING."""
    return _REGISTRY[code].width


def dtype_of(code: TypeCode) -> np.dtype:
    """Return the little-endian numpy dtype for a fixed-width code.

    Raises:
        UnknownTypeCode: For STRING, which has no array representation
    """
    dtype = _REGISTRY[code].dtype
    if dtype is None:
        raise UnknownTypeCode(int(code) | ARRAY_FLAG)
    return dtype


def code_for_dtype(dtype: Any) -> TypeCode:
    """Map a numpy dtype to its DMAP type code.

    Raises:
        EncodeError: If the dtype has no DMAP equivalent (bool, complex, object, ...)
    """
    normalized = np.dtype(dtype).newbyteorder("=")
    try:
        return _DTYPE_TO_CODE[normalized]
    except KeyError:
        raise EncodeError(f"numpy dtype {np.dtype(dtype)} has no DMAP type code") from None


def infer_code(value: Any) -> TypeCode:
    """Pick a type code for a plain Python or numpy scalar value.

    numpy scalars keep their exact dtype. Python ints become INT when they
    fit in 32 bits and LONG otherwise; Python floats become DOUBLE.
    """
    if isinstance(value, np.generic):
        if isinstance(value, np.str_):
            return TypeCode.STRING
        return code_for_dtype(value.dtype)
    if isinstance(value, bool):
        raise EncodeError("bool values have no DMAP type code")
    if isinstance(value, int):
        return TypeCode.INT if -(2**31) <= value < 2**31 else TypeCode.LONG
    if isinstance(value, float):
        return TypeCode.DOUBLE
    if isinstance(value, str):
        return TypeCode.STRING
    raise EncodeError(f"cannot infer DMAP type for {type(value).__name__}")


def decode_scalar(code: TypeCode, data: bytes | memoryview) -> ScalarValue:
    """Decode one value from exactly its element bytes.

    For STRING, ``data`` holds the UTF-8 text without its length prefix.

    Raises:
        DecodeError: If the byte count is wrong or a string is not valid UTF-8
    """
    info = _REGISTRY[code]
    if info.fmt is None:
        try:
            return bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 in string value: {e}") from e
    if len(data) != info.width:
        raise DecodeError(f"{code.name} needs {info.width} bytes, got {len(data)}")
    return info.fmt.unpack(data)[0]


def encode_scalar(code: TypeCode, value: Any) -> bytes:
    """Encode one value to its element bytes.

    For STRING the UTF-8 text is returned without a length prefix.

    Raises:
        EncodeError: If the value is the wrong kind or out of range for the code
    """
    info = _REGISTRY[code]
    if info.fmt is None:
        if not isinstance(value, str):
            raise EncodeError(f"STRING value must be str, got {type(value).__name__}")
        return value.encode("utf-8")

    if isinstance(value, (bool, np.bool_)) or isinstance(value, (str, bytes)):
        raise EncodeError(f"{code.name} value must be numeric, got {type(value).__name__}")
    if info.is_integer:
        if isinstance(value, (float, np.floating)):
            if not float(value).is_integer():
                raise EncodeError(f"{code.name} value must be integral, got {value}")
        value = int(value)
    else:
        value = float(value)
    try:
        return info.fmt.pack(value)
    except (struct.error, OverflowError) as e:
        raise EncodeError(f"value {value} out of range for {code.name}: {e}") from e
