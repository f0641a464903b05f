"""Remote object schema metadata and its process-lifetime cache."""

from forcemap.schema.cache import SchemaCache, SchemaFetcher
from forcemap.schema.models import (
    CURRENCY_CODE_FIELD,
    CURRENCY_TYPE,
    LOCATION_TYPE,
    CoercionKind,
    FieldDescriptor,
    ObjectSchema,
)


__all__ = [
    "CURRENCY_CODE_FIELD",
    "CURRENCY_TYPE",
    "LOCATION_TYPE",
    "CoercionKind",
    "FieldDescriptor",
    "ObjectSchema",
    "SchemaCache",
    "SchemaFetcher",
]
