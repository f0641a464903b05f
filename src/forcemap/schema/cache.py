"""Process-lifetime cache of remote object schemas.

The cache is constructed once, populated on demand through a
``SchemaFetcher`` and never invalidated. Population is serialized per
object name so concurrent first access performs exactly one fetch.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from forcemap.core.exceptions import SchemaFetchError, TransportError
from forcemap.observability.logging import get_logger
from forcemap.schema.models import ObjectSchema


logger = get_logger(__name__)


@runtime_checkable
class SchemaFetcher(Protocol):
    """Supplies raw describe documents for object names."""

    def fetch_schema(self, object_name: str) -> Mapping[str, Any]:
        """Return the describe document for ``object_name``.

        Raises:
            TransportError: If the document cannot be retrieved.
            SchemaFetchError: If the object name is unknown.
        """
        ...


class SchemaCache:
    """Memoizes ``ObjectSchema`` instances per object name.

    Example:
        ```python
        cache = SchemaCache(ForceApiClient(settings))
        schema = cache.describe("Account")
        schema.all_field_names
        ```
    """

    def __init__(self, fetcher: SchemaFetcher) -> None:
        self._fetcher = fetcher
        self._schemas: dict[str, ObjectSchema] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def describe(self, object_name: str) -> ObjectSchema:
        """Return the schema for ``object_name``, fetching it on first use.

        Raises:
            SchemaFetchError: If the fetch fails or the object is unknown.
        """
        schema = self._schemas.get(object_name)
        if schema is not None:
            return schema

        with self._lock_for(object_name):
            # Another caller may have populated it while we waited
            schema = self._schemas.get(object_name)
            if schema is not None:
                return schema

            logger.debug("Schema cache miss", object_name=object_name)
            schema = self._fetch(object_name)
            self._schemas[object_name] = schema
            logger.info(
                "Cached object schema",
                object_name=object_name,
                field_count=len(schema),
            )
            return schema

    def describe_many(self, object_names: Iterable[str]) -> dict[str, ObjectSchema]:
        """Describe several objects, preserving the given order."""
        return {name: self.describe(name) for name in object_names}

    def cached_names(self) -> list[str]:
        """Object names already populated."""
        return list(self._schemas)

    def __contains__(self, object_name: object) -> bool:
        return object_name in self._schemas

    def _lock_for(self, object_name: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(object_name)
            if lock is None:
                lock = self._locks[object_name] = threading.Lock()
            return lock

    def _fetch(self, object_name: str) -> ObjectSchema:
        try:
            document = self._fetcher.fetch_schema(object_name)
        except SchemaFetchError:
            logger.warning("Unknown object", object_name=object_name)
            raise
        except TransportError as e:
            logger.warning(
                "Schema fetch failed",
                object_name=object_name,
                error=str(e),
            )
            raise SchemaFetchError(object_name, str(e)) from e

        if not document:
            raise SchemaFetchError(object_name, "empty describe document")
        return ObjectSchema.from_wire(object_name, document)
