"""Schema-driven attribute mapping for the Force.com REST API."""

from forcemap.core.exceptions import FieldAccessError, ForceMapError, SchemaFetchError
from forcemap.mappers import AttributeMapper, MapMode
from forcemap.records import SObject, wire_field
from forcemap.schema import FieldDescriptor, ObjectSchema, SchemaCache


__version__ = "0.1.0"

__all__ = [
    "AttributeMapper",
    "FieldAccessError",
    "FieldDescriptor",
    "ForceMapError",
    "MapMode",
    "ObjectSchema",
    "SObject",
    "SchemaCache",
    "SchemaFetchError",
    "wire_field",
]
