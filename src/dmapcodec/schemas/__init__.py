"""Format schemas and record validation."""

from __future__ import annotations

from .tables import SCHEMAS, FieldSpec, FormatSchema, SchemaTable
from .validator import TypedRecord, coerce, find_violations, get_schema, is_valid, validate

__all__ = [
    "SCHEMAS",
    "FieldSpec",
    "FormatSchema",
    "SchemaTable",
    "TypedRecord",
    "coerce",
    "find_violations",
    "get_schema",
    "is_valid",
    "validate",
]
