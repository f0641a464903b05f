"""Force.com REST API HTTP client.

Synchronous httpx client that sends pre-issued bearer tokens. It implements
``SchemaFetcher`` so it can back a ``SchemaCache`` directly.
"""

from __future__ import annotations

import threading
from decimal import Decimal
from types import TracebackType
from typing import TYPE_CHECKING, Any

import httpx
import orjson
from pydantic import BaseModel

from forcemap.clients.force_api.models import SObjectMetadata
from forcemap.core.config import get_settings
from forcemap.core.exceptions import (
    ApiResponseError,
    ApiTimeoutError,
    ApiUnavailableError,
    SchemaFetchError,
)
from forcemap.observability.logging import get_logger


if TYPE_CHECKING:
    from forcemap.core.config import Settings


logger = get_logger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


class ForceApiClient:
    """HTTP client for the Force.com REST API.

    Example:
        ```python
        with ForceApiClient(settings) as client:
            document = client.fetch_schema("Account")
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        access_token: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._access_token = access_token or self._settings.FORCE_ACCESS_TOKEN
        self._http = http_client
        self._owns_http_client = http_client is None
        self._sobjects: dict[str, SObjectMetadata] | None = None
        self._sobjects_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        """Instance URL requests are resolved against."""
        url = self._settings.force_api.instance_url
        if not url:
            msg = "Force.com instance URL not configured"
            raise RuntimeError(msg)
        return url.rstrip("/")

    @property
    def data_path(self) -> str:
        """Versioned REST root path."""
        return f"/services/data/{self._settings.force_api.api_version}"

    @property
    def http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._settings.force_api.timeout),
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
            logger.info("ForceApiClient initialized", base_url=self.base_url)
        return self._http

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            self._http.close()
            self._http = None
        logger.debug("ForceApiClient closed")

    def __enter__(self) -> ForceApiClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Verbs
    # -------------------------------------------------------------------------

    def get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: dict[str, Any]) -> Any:
        return self._request("POST", path, payload=payload)

    def patch(self, path: str, payload: dict[str, Any]) -> Any:
        return self._request("PATCH", path, payload=payload)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and decode its JSON body.

        Returns:
            Decoded body, or None for empty (204) responses.

        Raises:
            ApiTimeoutError: If the request times out.
            ApiUnavailableError: If the API cannot be reached.
            ApiResponseError: For 4xx/5xx responses.
        """
        content = None
        if payload is not None:
            content = orjson.dumps(payload, default=_json_default)

        logger.debug("Force.com API request", method=method, path=path)

        try:
            response = self.http.request(
                method,
                path,
                params=params,
                content=content,
                headers={"Authorization": f"Bearer {self._access_token}"},
            )
        except httpx.TimeoutException as e:
            logger.warning("Force.com API request timed out", method=method, path=path)
            raise ApiTimeoutError(str(e)) from e
        except httpx.RequestError as e:
            logger.warning(
                "Failed to connect to Force.com API",
                method=method,
                path=path,
                error=str(e),
            )
            raise ApiUnavailableError(f"Failed to connect to Force.com API: {e}") from e

        if response.status_code >= 400:
            self._handle_error_response(response)

        if response.status_code == 204 or not response.content:
            return None
        return orjson.loads(response.content)

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Raise ``ApiResponseError`` for an error response.

        The API answers with a list of ``{message, errorCode, fields}``.
        """
        status_code = response.status_code
        errors: list[dict[str, Any]] = []
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            body = None

        if isinstance(body, list):
            errors = [e for e in body if isinstance(e, dict)]
        elif isinstance(body, dict):
            errors = [body]

        message = errors[0].get("message") if errors else None
        if not message:
            message = response.text or f"HTTP {status_code}"

        logger.warning(
            "Force.com API returned error",
            status_code=status_code,
            message=message,
        )
        raise ApiResponseError(status_code, str(message), errors)

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    def describe_global(self) -> dict[str, SObjectMetadata]:
        """List the org's objects with their URL templates. Memoized."""
        if self._sobjects is not None:
            return self._sobjects

        with self._sobjects_lock:
            if self._sobjects is None:
                data = self.get(f"{self.data_path}/sobjects/") or {}
                self._sobjects = {
                    item["name"]: SObjectMetadata.model_validate(item)
                    for item in data.get("sobjects", [])
                }
                logger.info("Loaded global describe", sobject_count=len(self._sobjects))
        return self._sobjects

    def sobject_metadata(self, object_name: str) -> SObjectMetadata:
        """Metadata for one object.

        Raises:
            SchemaFetchError: If the org has no such object.
        """
        metadata = self.describe_global().get(object_name)
        if metadata is None:
            raise SchemaFetchError(object_name, "no metadata for object")
        return metadata

    def fetch_schema(self, object_name: str) -> dict[str, Any]:
        """Fetch the raw describe document for ``object_name``."""
        metadata = self.sobject_metadata(object_name)
        path = metadata.describe_url or f"{metadata.sobject_url}/describe"
        return self.get(path) or {}
