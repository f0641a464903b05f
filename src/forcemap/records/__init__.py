"""Typed record base class and field declarations."""

from forcemap.records.base import (
    ID_FIELD,
    SKIP,
    HasIdentifier,
    RecordField,
    SObject,
    ValueKind,
    record_fields,
    record_wire_names,
    wire_field,
)


__all__ = [
    "ID_FIELD",
    "SKIP",
    "HasIdentifier",
    "RecordField",
    "SObject",
    "ValueKind",
    "record_fields",
    "record_wire_names",
    "wire_field",
]
