"""Schema validation and coercion.

Checks decoded records against the field tables in tables.py. Fields a
table does not list pass through untouched, so records written by newer
producers still validate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Union

from ..exceptions import (
    DmapError,
    FieldTypeMismatch,
    InconsistentDimensions,
    MissingField,
    UnsupportedSchema,
    ValidationError,
)
from ..models.field import Array, Field, Scalar
from ..models.record import Record
from .tables import SCHEMAS, FieldSpec, FormatSchema, SchemaTable

SchemaLike = Union[FormatSchema, str]


@dataclass(frozen=True)
class TypedRecord:
    """A record that has passed validation against ``schema``.

    Behaves like a read-only view of the wrapped record.
    """

    record: Record
    schema: FormatSchema

    def __getitem__(self, name: str) -> Field:
        return self.record[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.record)

    def __len__(self) -> int:
        return len(self.record)

    def __contains__(self, name: object) -> bool:
        return name in self.record

    def value(self, name: str) -> Any:
        return self.record.value(name)


def get_schema(schema: SchemaLike) -> SchemaTable:
    """Resolve a schema enum member or case-insensitive name to its table.

    Raises:
        UnsupportedSchema: If the name matches no known format
    """
    if isinstance(schema, FormatSchema):
        return SCHEMAS[schema]
    if isinstance(schema, str):
        try:
            return SCHEMAS[FormatSchema(schema.strip().lower())]
        except ValueError:
            pass
    raise UnsupportedSchema(schema)


def _describe(field: Field) -> str:
    if isinstance(field.payload, Array):
        return f"{field.code.name} array of rank {field.rank}"
    return field.code.name


def _conforms(spec: FieldSpec, field: Field) -> bool:
    if field.code != spec.code or field.is_array != spec.is_array:
        return False
    return spec.rank is None or field.rank == spec.rank


def _check(spec: FieldSpec, field: Field) -> list[ValidationError]:
    if _conforms(spec, field):
        return []
    return [FieldTypeMismatch(spec.name, spec.describe(), _describe(field))]


def find_violations(record: Record | TypedRecord, schema: SchemaLike) -> list[ValidationError]:
    """Collect every way ``record`` fails to satisfy ``schema``.

    Args:
        record: Record to check
        schema: Target format

    Returns:
        Violations in table order; empty when the record conforms

    Raises:
        UnsupportedSchema: If the schema name is unknown
    """
    table = get_schema(schema)
    if isinstance(record, TypedRecord):
        record = record.record

    violations: list[ValidationError] = []
    for spec in table.required:
        field = record.get(spec.name)
        if field is None:
            violations.append(MissingField(spec.name, table.schema.name))
        else:
            violations.extend(_check(spec, field))
    for spec in table.optional:
        field = record.get(spec.name)
        if field is not None:
            violations.extend(_check(spec, field))

    for group in table.matched:
        shapes = {
            name: record[name].payload.dimensions
            for name in group
            if name in record and isinstance(record[name].payload, Array)
        }
        if len(set(shapes.values())) > 1:
            violations.append(InconsistentDimensions(shapes))
    return violations


def validate(record: Record | TypedRecord, schema: SchemaLike) -> TypedRecord:
    """Validate a record against a schema.

    Validating an already validated record against the same schema returns
    an equal result. GENERIC accepts every record.

    Args:
        record: Record (or TypedRecord) to check
        schema: Target format, as an enum member or name

    Returns:
        The record tagged with its schema

    Raises:
        MissingField: If a required field is absent
        FieldTypeMismatch: If a listed field has the wrong type code or shape class
        InconsistentDimensions: If a matched array group disagrees on shape
        UnsupportedSchema: If the schema name is unknown

    Example:
        >>> typed = validate(record, "rawacf")
        >>> typed.schema
        <FormatSchema.RAWACF: 'rawacf'>
    """
    table = get_schema(schema)
    violations = find_violations(record, table.schema)
    if violations:
        raise violations[0]
    if isinstance(record, TypedRecord):
        record = record.record
    return TypedRecord(record, table.schema)


def is_valid(record: Record | TypedRecord, schema: SchemaLike) -> bool:
    return not find_violations(record, schema)


def coerce(record: Record, schema: SchemaLike) -> Record:
    """Cast scalar fields to the type their schema table lists.

    A scalar is cast only when its value fits the listed type; fields that
    cannot be cast, arrays, and unlisted fields are left unchanged, so a
    following ``validate`` reports whatever still does not conform.

    Example:
        >>> record = Record.from_dict({"stid": 65})   # inferred as INT
        >>> coerce(record, "rawacf")["stid"].code
        <TypeCode.SHORT: 2>
    """
    table = get_schema(schema)
    replacements = []
    for name, field in record.items():
        spec = table.spec(name)
        if spec is None or spec.is_array or field.is_array or field.code == spec.code:
            continue
        try:
            replacements.append(Field(name, Scalar(spec.code, field.payload.value)))
        except DmapError:
            continue
    return record.replace(*replacements) if replacements else record
