"""CRUD operations on typed records.

Each operation builds the object's URL from its global describe metadata,
runs the attribute mapper and hands the payload to the transport. The object
name and record or external id are bound to the log context for the duration
of the operation, so transport and mapper log lines carry them too.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from forcemap.clients.force_api import ForceApiClient, SObjectMetadata, SObjectResponse
from forcemap.mappers import AttributeMapper, MapMode
from forcemap.observability.logging import bind_context, get_logger, unbind_context
from forcemap.records import SObject
from forcemap.schema import SchemaCache


if TYPE_CHECKING:
    from forcemap.core.config import Settings
    from forcemap.schema import ObjectSchema


logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=SObject)


def _external_id_field(record_cls: type[SObject]) -> str:
    if not record_cls.external_id_api_name:
        msg = f"{record_cls.__name__} declares no external id field"
        raise ValueError(msg)
    return record_cls.external_id_api_name


@contextmanager
def _operation_context(**values: Any) -> Iterator[None]:
    """Bind ``values`` to the log context while an operation runs."""
    bind_context(**values)
    try:
        yield
    finally:
        unbind_context(*values)


class SObjectService:
    """Reads and writes typed records through the Force.com REST API.

    Example:
        ```python
        service = SObjectService.from_settings(get_settings())
        response = service.insert(contact, source=order)
        service.upsert_by_external_id("C-1001", contact, source=order)
        ```
    """

    def __init__(
        self,
        client: ForceApiClient,
        mapper: AttributeMapper | None = None,
    ) -> None:
        self._client = client
        self._mapper = mapper or AttributeMapper(SchemaCache(client))

    @classmethod
    def from_settings(cls, settings: Settings) -> SObjectService:
        """Build a service with its own client and schema cache."""
        return cls(ForceApiClient(settings))

    @property
    def mapper(self) -> AttributeMapper:
        return self._mapper

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def describe_sobjects(self) -> dict[str, SObjectMetadata]:
        return self._client.describe_global()

    def describe_sobject(self, record: SObject | type[SObject] | str) -> ObjectSchema:
        """Cached schema of a record, record class or object name."""
        name = record if isinstance(record, str) else record.object_name()
        return self._mapper.describe_schema(name)

    def _metadata(self, record_cls: type[SObject]) -> SObjectMetadata:
        return self._client.sobject_metadata(record_cls.object_name())

    # -------------------------------------------------------------------------
    # By id
    # -------------------------------------------------------------------------

    def get(
        self,
        record_id: str,
        record_cls: type[RecordT],
        fields: Iterable[str] = (),
    ) -> RecordT:
        """Fetch one record.

        With ``fields``, the request asks for every field ``record_cls``
        declares plus the named ones; without, the API returns all fields.
        """
        with _operation_context(object_name=record_cls.object_name(), record_id=record_id):
            fields = list(fields)
            params = None
            if fields:
                names = self._mapper.select_field_names(
                    record_cls.model_construct(), extra=fields
                )
                params = {"fields": ",".join(names)}

            data = self._client.get(self._metadata(record_cls).row_url(record_id), params)
            return record_cls.model_validate(data or {})

    def insert(self, record: SObject, source: Any = None) -> SObjectResponse:
        with _operation_context(object_name=record.object_name()):
            attributes = self._mapper.map_attributes(record, source, MapMode.INSERT)
            url = self._metadata(type(record)).sobject_url
            data = self._client.post(url, attributes)
            response = SObjectResponse.model_validate(data or {})
            logger.info(
                "Inserted record",
                object_name=record.object_name(),
                record_id=response.id,
            )
            return response

    def update(self, record_id: str, record: SObject, source: Any = None) -> None:
        with _operation_context(object_name=record.object_name(), record_id=record_id):
            attributes = self._mapper.map_attributes(record, source, MapMode.UPDATE)
            self._client.patch(self._metadata(type(record)).row_url(record_id), attributes)
            logger.info(
                "Updated record",
                object_name=record.object_name(),
                record_id=record_id,
            )

    def delete(self, record_id: str, record_cls: type[SObject]) -> None:
        with _operation_context(object_name=record_cls.object_name(), record_id=record_id):
            self._client.delete(self._metadata(record_cls).row_url(record_id))
            logger.info(
                "Deleted record",
                object_name=record_cls.object_name(),
                record_id=record_id,
            )

    # -------------------------------------------------------------------------
    # By external id
    # -------------------------------------------------------------------------

    def get_by_external_id(
        self,
        external_id: str,
        record_cls: type[RecordT],
        fields: Iterable[str] = (),
    ) -> RecordT:
        """Fetch one record addressed by its external id.

        ``fields`` is passed through as given.
        """
        with _operation_context(
            object_name=record_cls.object_name(), external_id=external_id
        ):
            url = self._metadata(record_cls).external_id_url(
                _external_id_field(record_cls), external_id
            )
            fields = list(fields)
            params = {"fields": ",".join(fields)} if fields else None
            data = self._client.get(url, params)
            return record_cls.model_validate(data or {})

    def upsert_by_external_id(
        self,
        external_id: str,
        record: SObject,
        source: Any = None,
    ) -> SObjectResponse:
        """Insert or update a record addressed by its external id.

        The external id travels in the URL, so its field is removed from the
        body.
        """
        record_cls = type(record)
        with _operation_context(
            object_name=record_cls.object_name(), external_id=external_id
        ):
            external_field = _external_id_field(record_cls)
            attributes = self._mapper.map_attributes(record, source, MapMode.UPDATE)
            attributes.pop(external_field, None)

            url = self._metadata(record_cls).external_id_url(external_field, external_id)
            data = self._client.patch(url, attributes)

            # 204 means an existing record was updated
            response = (
                SObjectResponse.model_validate(data)
                if data
                else SObjectResponse(success=True, created=False)
            )
            logger.info(
                "Upserted record",
                object_name=record.object_name(),
                external_id=external_id,
                created=response.created,
            )
            return response

    def delete_by_external_id(self, external_id: str, record_cls: type[SObject]) -> None:
        with _operation_context(
            object_name=record_cls.object_name(), external_id=external_id
        ):
            url = self._metadata(record_cls).external_id_url(
                _external_id_field(record_cls), external_id
            )
            self._client.delete(url)
            logger.info(
                "Deleted record",
                object_name=record_cls.object_name(),
                external_id=external_id,
            )
