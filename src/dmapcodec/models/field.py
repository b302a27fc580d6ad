"""Field value types.

A DMAP field is a name plus either a scalar payload or an n-dimensional
array payload. Array data is held flat, in row-major order, together with
its dimensions listed outer-to-inner.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

import numpy as np

from ..types import (
    ScalarValue,
    TypeCode,
    code_for_dtype,
    dtype_of,
    encode_scalar,
    infer_code,
)
from ..exceptions import EncodeError, InvalidDimension


def _same_value(left: ScalarValue, right: ScalarValue) -> bool:
    if isinstance(left, float) and isinstance(right, float):
        return left == right or (math.isnan(left) and math.isnan(right))
    return left == right


@dataclass(frozen=True, eq=False)
class Scalar:
    """A single value of one type code.

    The value is normalized to a plain Python int, float or str and checked
    against the type's range on construction.
    """

    code: TypeCode
    value: ScalarValue

    def __post_init__(self) -> None:
        code = TypeCode(self.code)
        object.__setattr__(self, "code", code)
        # Range and kind check; encode_scalar raises EncodeError on a bad value.
        raw = encode_scalar(code, self.value)
        if code is TypeCode.STRING:
            normalized: ScalarValue = str(self.value)
        elif code in (TypeCode.FLOAT, TypeCode.DOUBLE):
            normalized = float(self.value)
        else:
            normalized = int(self.value)
        if code is TypeCode.FLOAT:
            # Store the value as it will read back from its 4-byte form.
            normalized = float(np.frombuffer(raw, dtype="<f4")[0])
        object.__setattr__(self, "value", normalized)

    @classmethod
    def infer(cls, value: Any) -> Scalar:
        """Build a Scalar whose type code is inferred from the value."""
        if isinstance(value, np.generic) and not isinstance(value, np.str_):
            return cls(infer_code(value), value.item())
        return cls(infer_code(value), value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.code == other.code and _same_value(self.value, other.value)

    def __hash__(self) -> int:
        if isinstance(self.value, float) and math.isnan(self.value):
            return hash((self.code, "nan"))
        return hash((self.code, self.value))

    def __repr__(self) -> str:
        return f"Scalar({self.code.name}, {self.value!r})"


@dataclass(frozen=True, eq=False)
class Array:
    """An n-dimensional array of one fixed-width type code.

    Attributes:
        code: Element type code (never STRING)
        dimensions: Sizes outer-to-inner; every size is positive
        data: Flat, owned numpy array with ``prod(dimensions)`` elements
    """

    code: TypeCode
    dimensions: tuple[int, ...]
    data: np.ndarray

    def __post_init__(self) -> None:
        code = TypeCode(self.code)
        dtype = dtype_of(code)
        dimensions = tuple(int(d) for d in self.dimensions)
        count = check_dimensions("", dimensions)

        try:
            source = np.asarray(self.data)
        except (TypeError, ValueError) as e:
            raise EncodeError(f"cannot store data as {code.name}: {e}") from e
        if source.dtype.kind not in "iuf" or (source.dtype.kind == "f" and dtype.kind in "iu"):
            raise EncodeError(f"cannot store {source.dtype} data as {code.name}")

        # Always take a private copy so the caller's array is never shared.
        with np.errstate(over="ignore"):
            flat = source.astype(dtype, order="C", copy=True).reshape(-1)
        if source.dtype != dtype:
            if dtype.kind in "iu":
                lost = not np.array_equal(flat, source.reshape(-1))
            else:
                lost = bool(np.any(np.isfinite(source.reshape(-1)) & ~np.isfinite(flat)))
            if lost:
                raise EncodeError(f"array values out of range for {code.name}")

        if flat.size != count:
            raise InvalidDimension("", dimensions, f"{flat.size} elements do not fill the shape")
        flat.flags.writeable = False
        object.__setattr__(self, "code", code)
        object.__setattr__(self, "dimensions", dimensions)
        object.__setattr__(self, "data", flat)

    @classmethod
    def from_ndarray(cls, values: Any, code: Optional[TypeCode] = None) -> Array:
        """Build an Array from any array-like, keeping its shape.

        Args:
            values: numpy array or nested sequence
            code: Element type; inferred from the array dtype when omitted
        """
        arr = np.asarray(values)
        if code is None:
            code = code_for_dtype(arr.dtype)
        return cls(code, arr.shape, arr)

    @property
    def values(self) -> np.ndarray:
        """The data reshaped to ``dimensions`` (a read-only view)."""
        return self.data.reshape(self.dimensions)

    @property
    def rank(self) -> int:
        return len(self.dimensions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return (
            self.code == other.code
            and self.dimensions == other.dimensions
            and self.data.tobytes() == other.data.tobytes()
        )

    def __hash__(self) -> int:
        return hash((self.code, self.dimensions, self.data.tobytes()))

    def __repr__(self) -> str:
        return f"Array({self.code.name}, {list(self.dimensions)}, {self.data.tolist()!r})"


Payload = Union[Scalar, Array]


@dataclass(frozen=True)
class Field:
    """One named DMAP field."""

    name: str
    payload: Payload

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise EncodeError(f"field name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.payload, (Scalar, Array)):
            raise EncodeError(
                f"field '{self.name}' payload must be Scalar or Array, "
                f"got {type(self.payload).__name__}"
            )

    @classmethod
    def scalar(cls, name: str, code: TypeCode, value: ScalarValue) -> Field:
        return cls(name, Scalar(code, value))

    @classmethod
    def array(
        cls,
        name: str,
        code: TypeCode,
        data: Any,
        dimensions: Optional[Sequence[int]] = None,
    ) -> Field:
        """Build an array field.

        Args:
            name: Field name
            code: Element type code
            data: Array-like values
            dimensions: Shape outer-to-inner; defaults to the shape of ``data``
        """
        arr = np.asarray(data)
        dims = tuple(dimensions) if dimensions is not None else arr.shape
        try:
            return cls(name, Array(code, dims, arr))
        except InvalidDimension as e:
            raise InvalidDimension(name, e.dimensions, e.reason) from None

    @property
    def code(self) -> TypeCode:
        return self.payload.code

    @property
    def is_array(self) -> bool:
        return isinstance(self.payload, Array)

    @property
    def rank(self) -> int:
        """0 for scalars, number of dimensions for arrays."""
        return self.payload.rank if isinstance(self.payload, Array) else 0

    @property
    def value(self) -> Any:
        """Host value: the scalar value, or the reshaped numpy array."""
        if isinstance(self.payload, Array):
            return self.payload.values
        return self.payload.value

    def describe(self) -> str:
        """Short type/shape description, e.g. ``SHORT`` or ``FLOAT[75]``."""
        if isinstance(self.payload, Array):
            return f"{self.code.name}{list(self.payload.dimensions)}"
        return self.code.name


def check_dimensions(name: str, dimensions: Sequence[int], offset: Optional[int] = None) -> int:
    """Validate an array shape and return its element count.

    Raises:
        InvalidDimension: If there are no dimensions, any dimension is not
            positive, or the element count exceeds what can be addressed
    """
    if len(dimensions) == 0:
        raise InvalidDimension(name, dimensions, "arrays need at least one dimension", offset)
    if len(dimensions) > 255:
        raise InvalidDimension(name, dimensions, "more than 255 dimensions", offset)
    count = 1
    for dim in dimensions:
        if dim <= 0:
            raise InvalidDimension(name, dimensions, "dimensions must be positive", offset)
        if dim >= 2**31:
            raise InvalidDimension(name, dimensions, "dimension exceeds 32 bits", offset)
        count *= dim
    if count > np.iinfo(np.intp).max:
        raise InvalidDimension(name, dimensions, "element count overflows", offset)
    return count
