"""Typed record declarations.

A record is a pydantic model whose fields declare the wire name they map to
(the field alias) and, optionally, a dotted path into a secondary source
record that overrides the record's own value::

    class Contact(SObject):
        api_name: ClassVar[str] = "Contact"
        external_id_api_name: ClassVar[str | None] = "External_Id__c"

        id: str | None = wire_field("Id")
        last_name: str | None = wire_field("LastName", source="customer.surname")
        account: Account | str | None = wire_field("Account")

Fields declared without ``wire_field`` (or with the skip marker ``"-"``) are
ignored by the mapper. The per-class field table is built once on first use.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from functools import cache
from typing import (
    Any,
    ClassVar,
    Final,
    Protocol,
    Union,
    get_args,
    get_origin,
    runtime_checkable,
)

from pydantic import BaseModel, ConfigDict, Field


SKIP: Final[str] = "-"
ID_FIELD: Final[str] = "Id"

_WIRE_KEY: Final[str] = "wire_name"
_SOURCE_KEY: Final[str] = "source_path"


class ValueKind(StrEnum):
    """Shape of a record field's value, resolved from its annotation."""

    SCALAR = "scalar"
    FLOAT = "float"
    DECIMAL = "decimal"
    TIMESTAMP = "timestamp"
    RECORD = "record"


@runtime_checkable
class HasIdentifier(Protocol):
    """Anything that can be collapsed to a remote record id."""

    def identifier(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class RecordField:
    """One entry of a record class's field table."""

    attr: str
    wire_name: str
    source_path: str | None
    kind: ValueKind


def wire_field(
    name: str,
    *,
    source: str | None = None,
    default: Any = None,
    **kwargs: Any,
) -> Any:
    """Declare a record field mapped to wire field ``name``.

    Args:
        name: Wire field name, or ``"-"`` to keep the field off the wire.
        source: Optional dotted path into the source record.
        default: Field default.
        **kwargs: Passed through to ``pydantic.Field``.
    """
    extra = {_WIRE_KEY: name}
    if source:
        extra[_SOURCE_KEY] = source
    alias = name if name != SKIP else None
    return Field(default, alias=alias, json_schema_extra=extra, **kwargs)


class SObject(BaseModel):
    """Base class for typed records of a remote object type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_name: ClassVar[str] = ""
    external_id_api_name: ClassVar[str | None] = None

    @classmethod
    def object_name(cls) -> str:
        """Remote object type name, defaulting to the class name."""
        return cls.api_name or cls.__name__

    def identifier(self) -> str | None:
        """Value of the record's ``Id`` wire field, if it declares one."""
        for rf in record_fields(type(self)):
            if rf.wire_name == ID_FIELD:
                value = getattr(self, rf.attr)
                return value if isinstance(value, str) else None
        return None


def _is_record_type(tp: Any) -> bool:
    return get_origin(tp) is None and isinstance(tp, type) and issubclass(tp, SObject)


def _value_kind(annotation: Any) -> ValueKind:
    candidates = [annotation]
    if get_origin(annotation) in (Union, types.UnionType):
        candidates = [a for a in get_args(annotation) if a is not type(None)]

    if any(_is_record_type(tp) for tp in candidates):
        return ValueKind.RECORD
    if len(candidates) != 1:
        return ValueKind.SCALAR

    tp = candidates[0]
    if tp is datetime:
        return ValueKind.TIMESTAMP
    if tp is float:
        return ValueKind.FLOAT
    if tp is Decimal:
        return ValueKind.DECIMAL
    return ValueKind.SCALAR


@cache
def record_fields(cls: type[SObject]) -> tuple[RecordField, ...]:
    """Field table of a record class, in declaration order."""
    table = []
    for attr, info in cls.model_fields.items():
        extra = info.json_schema_extra
        if not isinstance(extra, dict):
            continue
        wire_name = extra.get(_WIRE_KEY)
        if not wire_name or wire_name == SKIP:
            continue
        source_path = extra.get(_SOURCE_KEY)
        table.append(
            RecordField(
                attr=attr,
                wire_name=str(wire_name),
                source_path=str(source_path) if source_path else None,
                kind=_value_kind(info.annotation),
            )
        )
    return tuple(table)


@cache
def record_wire_names(cls: type[SObject]) -> frozenset[str]:
    """Wire names declared by a record class."""
    return frozenset(rf.wire_name for rf in record_fields(cls))
