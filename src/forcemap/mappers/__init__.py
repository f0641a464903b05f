"""Mapping between typed records and wire attribute sets."""

from forcemap.mappers.attributes import AttributeMapper, MapMode, ResolvedValue
from forcemap.mappers.countries import country_code
from forcemap.mappers.paths import is_empty, resolve_path


__all__ = [
    "AttributeMapper",
    "MapMode",
    "ResolvedValue",
    "country_code",
    "is_empty",
    "resolve_path",
]
