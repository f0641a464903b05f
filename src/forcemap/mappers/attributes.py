"""Attribute mapping between typed records and wire payloads.

Mapping runs in two steps:

1. Resolve every declared wire field of the record, letting non-empty
   values found at the field's source path override the record's own value,
   and folding country/state names into their ``...Code`` fields.
2. Project the resolved values through the object's remote schema. On write
   paths only writable fields survive, with currency, currency code and
   relationship coercions applied. Selective reads produce the field list to
   request instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from forcemap.mappers.countries import CODE_SUFFIX, country_code, is_country_field
from forcemap.mappers.paths import is_empty, resolve_path
from forcemap.observability.logging import get_logger
from forcemap.records import (
    HasIdentifier,
    RecordField,
    ValueKind,
    record_fields,
    record_wire_names,
)
from forcemap.schema.models import CoercionKind, FieldDescriptor


if TYPE_CHECKING:
    from forcemap.records import SObject
    from forcemap.schema import ObjectSchema, SchemaCache


logger = get_logger(__name__)


class MapMode(StrEnum):
    """What the produced attribute set is for."""

    INSERT = "insert"
    UPDATE = "update"
    SELECTIVE_READ = "selective_read"


@dataclass(frozen=True, slots=True)
class ResolvedValue:
    """A field value after resolution, remembering where it came from."""

    value: Any
    from_source: bool = False


def _collapse(value: Any) -> Any:
    if isinstance(value, HasIdentifier) and callable(value.identifier):
        return value.identifier()
    return value


def _coerce_source_value(value: Any, kind: ValueKind) -> Any:
    if isinstance(value, bool) or not isinstance(value, int):
        return value
    if kind is ValueKind.TIMESTAMP:
        try:
            return datetime.fromtimestamp(value, tz=UTC)
        except (OverflowError, OSError, ValueError):
            # Not epoch seconds (e.g. milliseconds); treated as absent
            return None
    if kind is ValueKind.FLOAT:
        return float(value)
    if kind is ValueKind.DECIMAL:
        return Decimal(value)
    return value


def _resolve_field(record: SObject, field: RecordField, source: Any) -> ResolvedValue:
    if source is not None and field.source_path:
        found = resolve_path(source, field.source_path)
        if not is_empty(found):
            value = _coerce_source_value(found, field.kind)
            if value is not None:
                return ResolvedValue(_collapse(value), from_source=True)
    return ResolvedValue(_collapse(getattr(record, field.attr)))


def _coerce_for_write(descriptor: FieldDescriptor, resolved: ResolvedValue) -> Any:
    value = resolved.value
    match descriptor.coercion:
        case CoercionKind.CURRENCY:
            # Source systems send minor units; only those values are scaled
            if resolved.from_source and isinstance(value, (float, Decimal)):
                return value / 100
        case CoercionKind.CURRENCY_CODE:
            if isinstance(value, str):
                return value.upper()
        case CoercionKind.RELATIONSHIP:
            return _collapse(value)
    return value


class AttributeMapper:
    """Builds wire attribute sets for typed records.

    Example:
        ```python
        mapper = AttributeMapper(SchemaCache(client))
        payload = mapper.map_attributes(contact, order, MapMode.INSERT)
        payload.pop(Contact.external_id_api_name, None)
        ```
    """

    def __init__(self, schema_cache: SchemaCache) -> None:
        self._schemas = schema_cache

    def describe_schema(self, object_name: str) -> ObjectSchema:
        """Return the cached schema for ``object_name``."""
        return self._schemas.describe(object_name)

    def resolve_fields(
        self,
        record: SObject,
        source: Any = None,
    ) -> dict[str, ResolvedValue]:
        """Resolve the record's declared fields, keyed by wire name.

        Raises:
            FieldAccessError: If a source path names a missing attribute.
        """
        record_cls = type(record)
        declared = record_wire_names(record_cls)
        resolved: dict[str, ResolvedValue] = {}

        for field in record_fields(record_cls):
            wire_name = field.wire_name
            entry = _resolve_field(record, field, source)

            if is_country_field(wire_name) and isinstance(entry.value, str):
                code = entry.value
                if len(code) != 2:
                    code = country_code(code) or code
                code_field = wire_name + CODE_SUFFIX
                if len(code) == 2 and code_field in declared:
                    wire_name = code_field
                    entry = ResolvedValue(code, entry.from_source)

            # An unset field never displaces a value already resolved under its key
            if entry.value is None and wire_name in resolved:
                continue
            resolved[wire_name] = entry

        return resolved

    def map_attributes(
        self,
        record: SObject,
        source: Any = None,
        mode: MapMode = MapMode.INSERT,
    ) -> dict[str, Any]:
        """Build the attribute set for ``record``.

        Args:
            record: Typed record to map.
            source: Optional secondary record consulted at declared source paths.
            mode: Insert and update produce a write payload; selective read
                produces read keys mapped to resolved values.

        Returns:
            Wire field name to value. Keys are independent and may be removed.

        Raises:
            SchemaFetchError: If the record's schema cannot be obtained.
            FieldAccessError: If a source path names a missing attribute.
        """
        resolved = self.resolve_fields(record, source)
        schema = self._schemas.describe(record.object_name())

        attributes: dict[str, Any] = {}
        for descriptor in schema.fields:
            entry = resolved.get(descriptor.lookup_key)
            if entry is None:
                continue

            if mode is MapMode.SELECTIVE_READ:
                attributes[descriptor.read_key] = entry.value
                continue

            if entry.value is None or not descriptor.writable:
                continue
            attributes[descriptor.name] = _coerce_for_write(descriptor, entry)

        logger.debug(
            "Mapped record attributes",
            object_name=schema.name,
            mode=mode.value,
            declared=len(resolved),
            mapped=len(attributes),
        )
        return attributes

    def select_field_names(
        self,
        record: SObject,
        source: Any = None,
        extra: Iterable[str] = (),
    ) -> list[str]:
        """Field names to request when reading ``record``'s object.

        Schema-known fields the record declares come first in schema order,
        relationships as ``<relation>.Id``, followed by ``extra`` names.
        Duplicates are dropped.
        """
        attributes = self.map_attributes(record, source, MapMode.SELECTIVE_READ)
        return list(dict.fromkeys([*attributes, *extra]))
