"""Record value type and builder.

A Record is an ordered, immutable mapping from field name to Field. Field
order is the on-disk order and survives a round trip. Header metadata is
derived from the fields, so the declared length always matches the
encoded length.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

import numpy as np

from ..exceptions import DuplicateField
from ..types import DMAP_CODE, TypeCode
from ..utils.sizing import encoded_size
from .field import Array, Field, Scalar


@dataclass(frozen=True)
class RecordHeader:
    """Fixed record header.

    Attributes:
        code: Format/type discriminant
        size: Total record length in bytes, header included
        scalar_count: Number of scalar fields
        array_count: Number of array fields
    """

    code: int
    size: int
    scalar_count: int
    array_count: int

    @property
    def field_count(self) -> int:
        return self.scalar_count + self.array_count


class Record(Mapping[str, Field]):
    """An ordered collection of uniquely named fields.

    Example:
        >>> record = Record([
        ...     Field.scalar("radar.revision.major", TypeCode.CHAR, 4),
        ...     Field.array("pwr0", TypeCode.FLOAT, [1.0, 2.0, 3.0]),
        ... ])
        >>> record["pwr0"].value
        array([1., 2., 3.], dtype=float32)
        >>> record.header.size
        68
    """

    __slots__ = ("_code", "_fields", "_header")

    def __init__(self, fields: Iterable[Field] = (), code: int = DMAP_CODE) -> None:
        """Initialize a record.

        Args:
            fields: Fields in on-disk order
            code: Header discriminant

        Raises:
            DuplicateField: If two fields share a name
        """
        self._code = int(code)
        self._fields: dict[str, Field] = {}
        self._header: Optional[RecordHeader] = None
        for field in fields:
            if field.name in self._fields:
                raise DuplicateField(field.name)
            self._fields[field.name] = field

    @classmethod
    def from_dict(cls, values: Mapping[str, Any], code: int = DMAP_CODE) -> Record:
        """Build a record from plain host values, inferring each type code.

        Fields and Scalar/Array payloads are taken as-is; numpy arrays and
        nested sequences become arrays; everything else becomes a scalar.

        Example:
            >>> Record.from_dict({"stid": np.int16(65), "pwr0": np.zeros(75, np.float32)})
        """
        fields = []
        for name, value in values.items():
            if isinstance(value, Field):
                fields.append(Field(name, value.payload))
            elif isinstance(value, (Scalar, Array)):
                fields.append(Field(name, value))
            elif isinstance(value, (np.ndarray, list, tuple)):
                fields.append(Field(name, Array.from_ndarray(value)))
            else:
                fields.append(Field(name, Scalar.infer(value)))
        return cls(fields, code=code)

    @property
    def code(self) -> int:
        return self._code

    @property
    def header(self) -> RecordHeader:
        """Header recomputed from the fields."""
        if self._header is None:
            arrays = sum(1 for field in self._fields.values() if field.is_array)
            self._header = RecordHeader(
                code=self._code,
                size=encoded_size(self),
                scalar_count=len(self._fields) - arrays,
                array_count=arrays,
            )
        return self._header

    @property
    def scalar_count(self) -> int:
        return self.header.scalar_count

    @property
    def array_count(self) -> int:
        return self.header.array_count

    def __getitem__(self, name: str) -> Field:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def value(self, name: str) -> Any:
        """Host value of one field (scalar value or reshaped array)."""
        return self._fields[name].value

    def to_dict(self) -> dict[str, Any]:
        """Plain ``{name: value}`` view in field order."""
        return {name: field.value for name, field in self._fields.items()}

    def replace(self, *fields: Field) -> Record:
        """Return a copy with the given fields swapped in by name.

        Replaced fields keep their position; new names are appended.
        """
        updated = dict(self._fields)
        for field in fields:
            updated[field.name] = field
        return Record(updated.values(), code=self._code)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._code == other._code and list(self._fields.items()) == list(
            other._fields.items()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        listing = ", ".join(f"{name}: {field.describe()}" for name, field in self._fields.items())
        return f"Record(code={self._code}, {{{listing}}})"


class RecordBuilder:
    """Field-by-field construction of a Record (the write path).

    Example:
        >>> record = (
        ...     RecordBuilder()
        ...     .scalar("stid", TypeCode.SHORT, 65)
        ...     .array("slist", TypeCode.SHORT, [0, 1, 2])
        ...     .build()
        ... )
    """

    def __init__(self, code: int = DMAP_CODE) -> None:
        self._code = code
        self._fields: dict[str, Field] = {}

    def add(self, field: Field) -> RecordBuilder:
        """Append a field.

        Raises:
            DuplicateField: If the name is already present
        """
        if field.name in self._fields:
            raise DuplicateField(field.name)
        self._fields[field.name] = field
        return self

    def scalar(self, name: str, code: TypeCode, value: Any) -> RecordBuilder:
        return self.add(Field.scalar(name, code, value))

    def array(
        self, name: str, code: TypeCode, data: Any, dimensions: Optional[Iterable[int]] = None
    ) -> RecordBuilder:
        dims = tuple(dimensions) if dimensions is not None else None
        return self.add(Field.array(name, code, data, dims))

    def build(self) -> Record:
        return Record(self._fields.values(), code=self._code)
