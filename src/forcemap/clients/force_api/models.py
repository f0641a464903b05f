"""Response models for the Force.com REST API."""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, Field


SOBJECT_URL_KEY: Final[str] = "sobject"
DESCRIBE_URL_KEY: Final[str] = "describe"
ROW_TEMPLATE_URL_KEY: Final[str] = "rowTemplate"
ID_PLACEHOLDER: Final[str] = "{ID}"


class SObjectMetadata(BaseModel):
    """One entry of the global describe listing."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    name: str
    label: str | None = None
    custom: bool = False
    urls: dict[str, str] = Field(default_factory=dict)

    @property
    def sobject_url(self) -> str:
        return self.urls[SOBJECT_URL_KEY]

    @property
    def describe_url(self) -> str | None:
        return self.urls.get(DESCRIBE_URL_KEY)

    def row_url(self, record_id: str) -> str:
        """Row URL for ``record_id`` built from the row template."""
        return self.urls[ROW_TEMPLATE_URL_KEY].replace(ID_PLACEHOLDER, record_id, 1)

    def external_id_url(self, external_id_field: str, external_id: str) -> str:
        """Row URL addressing a record by external id."""
        return f"{self.sobject_url}/{external_id_field}/{external_id}"


class SObjectResponse(BaseModel):
    """Result of an insert or upsert."""

    model_config = {"populate_by_name": True, "extra": "ignore"}

    id: str | None = None
    success: bool = False
    errors: list[dict[str, Any]] = Field(default_factory=list)
    created: bool | None = None
