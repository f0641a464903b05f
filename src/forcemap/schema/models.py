"""Remote object schema models.

A describe document from the Force.com API is reduced to an ``ObjectSchema``:
the ordered field descriptors the mapper needs, plus the derived
"select all" field list.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Final

from forcemap.core.exceptions import SchemaFetchError


CURRENCY_TYPE: Final[str] = "currency"
LOCATION_TYPE: Final[str] = "location"
DEFAULT_TYPE: Final[str] = "string"
CURRENCY_CODE_FIELD: Final[str] = "CurrencyIsoCode"


class CoercionKind(StrEnum):
    """How a value bound for a field is coerced on write.

    Resolved once when the descriptor is built, never per call.
    """

    PLAIN = "plain"
    CURRENCY = "currency"
    CURRENCY_CODE = "currency_code"
    RELATIONSHIP = "relationship"


def _coercion_for(name: str, wire_type: str, relationship_name: str | None) -> CoercionKind:
    if relationship_name:
        return CoercionKind.RELATIONSHIP
    if wire_type == CURRENCY_TYPE:
        return CoercionKind.CURRENCY
    if name == CURRENCY_CODE_FIELD:
        return CoercionKind.CURRENCY_CODE
    return CoercionKind.PLAIN


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """Metadata for one remote field."""

    name: str
    wire_type: str = DEFAULT_TYPE
    relationship_name: str | None = None
    writable: bool = False
    coercion: CoercionKind = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "coercion",
            _coercion_for(self.name, self.wire_type, self.relationship_name),
        )

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> FieldDescriptor:
        """Build from one entry of a describe document's ``fields`` list."""
        return cls(
            name=str(data["name"]),
            wire_type=str(data.get("type") or DEFAULT_TYPE),
            relationship_name=data.get("relationshipName") or None,
            writable=bool(data.get("updateable", False)),
        )

    @property
    def is_relationship(self) -> bool:
        return self.relationship_name is not None

    @property
    def lookup_key(self) -> str:
        """Key under which record values for this field are resolved."""
        return self.relationship_name or self.name

    @property
    def read_key(self) -> str:
        """Name used in a selective-read field list."""
        if self.relationship_name:
            return f"{self.relationship_name}.Id"
        return self.name


@dataclass(frozen=True, slots=True)
class ObjectSchema:
    """Ordered field descriptors of one remote object type.

    ``all_field_names`` joins every wire name in schema order except
    location-typed fields, which the query layer cannot project inline.
    """

    name: str
    fields: tuple[FieldDescriptor, ...]
    all_field_names: str = field(init=False)
    _index: dict[str, FieldDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "all_field_names",
            ", ".join(f.name for f in self.fields if f.wire_type != LOCATION_TYPE),
        )
        index: dict[str, FieldDescriptor] = {}
        for descriptor in self.fields:
            index.setdefault(descriptor.name, descriptor)
            if descriptor.relationship_name:
                index.setdefault(descriptor.relationship_name, descriptor)
        object.__setattr__(self, "_index", index)

    @classmethod
    def from_wire(cls, name: str, document: Mapping[str, Any]) -> ObjectSchema:
        """Build from a raw describe document.

        Raises:
            SchemaFetchError: If the document has no usable ``fields`` list.
        """
        raw_fields = document.get("fields")
        if not isinstance(raw_fields, list):
            raise SchemaFetchError(name, "describe document has no field list")
        try:
            fields = tuple(FieldDescriptor.from_wire(f) for f in raw_fields)
        except (KeyError, TypeError) as e:
            raise SchemaFetchError(name, f"malformed field entry: {e}") from e
        return cls(name=name, fields=fields)

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Resolve a wire name or relationship name to its descriptor."""
        return self._index.get(name)

    @property
    def writable_field_names(self) -> list[str]:
        return [f.name for f in self.fields if f.writable]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)
