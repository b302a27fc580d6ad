"""Unit tests for the type registry."""

from __future__ import annotations

import numpy as np
import pytest

from dmapcodec import DecodeError, EncodeError, TypeCode, UnknownTypeCode
from dmapcodec.types import (
    code_for_dtype,
    decode_scalar,
    dtype_of,
    encode_scalar,
    infer_code,
    lookup,
    sizeof,
)


class TestRegistry:
    """Test code lookup and element widths."""

    @pytest.mark.parametrize(
        ("code", "width"),
        [
            (TypeCode.CHAR, 1),
            (TypeCode.SHORT, 2),
            (TypeCode.INT, 4),
            (TypeCode.LONG, 8),
            (TypeCode.UCHAR, 1),
            (TypeCode.USHORT, 2),
            (TypeCode.UINT, 4),
            (TypeCode.ULONG, 8),
            (TypeCode.FLOAT, 4),
            (TypeCode.DOUBLE, 8),
            (TypeCode.STRING, 0),
        ],
    )
    def test_sizeof(self, code: TypeCode, width: int) -> None:
        """Test fixed element widths."""
        assert sizeof(code) == width

    def test_lookup_known_code(self) -> None:
        """Test resolving a raw byte to a TypeCode."""
        assert lookup(3) is TypeCode.INT
        assert lookup(19) is TypeCode.ULONG

    def test_lookup_unknown_code(self) -> None:
        """Test unknown codes carry the code and offset."""
        with pytest.raises(UnknownTypeCode) as exc_info:
            lookup(0x7F, offset=12)

        assert exc_info.value.code == 0x7F
        assert exc_info.value.offset == 12

    def test_string_has_no_dtype(self) -> None:
        """Test strings cannot be array elements."""
        with pytest.raises(UnknownTypeCode):
            dtype_of(TypeCode.STRING)

    def test_dtype_is_little_endian(self) -> None:
        """Test dtypes use the wire byte order."""
        assert dtype_of(TypeCode.INT) == np.dtype("<i4")
        assert dtype_of(TypeCode.DOUBLE) == np.dtype("<f8")


class TestScalarCodec:
    """Test single value encoding and decoding."""

    def test_decode_short(self) -> None:
        """Test little-endian decoding."""
        assert decode_scalar(TypeCode.SHORT, b"\x41\x00") == 65

    def test_encode_int(self) -> None:
        """Test two's complement encoding."""
        assert encode_scalar(TypeCode.INT, -1) == b"\xff\xff\xff\xff"

    def test_encode_string(self) -> None:
        """Test strings are encoded without a length prefix."""
        assert encode_scalar(TypeCode.STRING, "abc") == b"abc"
        assert decode_scalar(TypeCode.STRING, b"abc") == "abc"

    def test_integral_float_accepted(self) -> None:
        """Test whole floats may be stored in integer types."""
        assert encode_scalar(TypeCode.SHORT, 2.0) == b"\x02\x00"

    @pytest.mark.parametrize(
        ("code", "value"),
        [
            (TypeCode.CHAR, 128),
            (TypeCode.CHAR, -129),
            (TypeCode.UCHAR, -1),
            (TypeCode.USHORT, 65536),
            (TypeCode.SHORT, 2.5),
            (TypeCode.SHORT, "1"),
            (TypeCode.INT, True),
            (TypeCode.STRING, 5),
            (TypeCode.FLOAT, 1e39),
        ],
    )
    def test_encode_rejects_bad_values(self, code: TypeCode, value: object) -> None:
        """Test out-of-range and wrong-kind values."""
        with pytest.raises(EncodeError):
            encode_scalar(code, value)

    def test_decode_wrong_width(self) -> None:
        """Test decoding with the wrong number of bytes."""
        with pytest.raises(DecodeError):
            decode_scalar(TypeCode.INT, b"\x00")

    def test_decode_invalid_utf8(self) -> None:
        """Test strings must be valid UTF-8."""
        with pytest.raises(DecodeError):
            decode_scalar(TypeCode.STRING, b"\xff\xfe")


class TestInference:
    """Test type code inference from host values."""

    @pytest.mark.parametrize(
        ("value", "code"),
        [
            (5, TypeCode.INT),
            (2**40, TypeCode.LONG),
            (1.5, TypeCode.DOUBLE),
            ("x", TypeCode.STRING),
            (np.int16(3), TypeCode.SHORT),
            (np.uint8(3), TypeCode.UCHAR),
            (np.float32(1.0), TypeCode.FLOAT),
        ],
    )
    def test_infer_code(self, value: object, code: TypeCode) -> None:
        """Test inferred codes."""
        assert infer_code(value) is code

    @pytest.mark.parametrize("value", [True, None, b"bytes", [1, 2]])
    def test_infer_rejects(self, value: object) -> None:
        """Test values with no DMAP type."""
        with pytest.raises(EncodeError):
            infer_code(value)

    def test_code_for_dtype(self) -> None:
        """Test mapping numpy dtypes to codes."""
        assert code_for_dtype(np.float64) is TypeCode.DOUBLE
        assert code_for_dtype(np.int8) is TypeCode.CHAR
        assert code_for_dtype(np.uint64) is TypeCode.ULONG

    def test_code_for_unsupported_dtype(self) -> None:
        """Test bool and complex arrays have no code."""
        with pytest.raises(EncodeError):
            code_for_dtype(np.bool_)
        with pytest.raises(EncodeError):
            code_for_dtype(np.complex128)
