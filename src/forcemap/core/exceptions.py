"""Exception hierarchy for the mapping engine and its collaborators.

Mapping irregularities (missing optional values, coercion mismatches,
unresolvable relationship identifiers) never raise; they are resolved by
omission. Only the conditions below are surfaced to callers.
"""

from __future__ import annotations

from typing import Any


class ForceMapError(Exception):
    """Base exception for all forcemap errors."""


class SchemaFetchError(ForceMapError):
    """Raised when an object schema cannot be obtained.

    Covers both unknown object names and transport failures while fetching
    the describe document. Never retried internally.
    """

    def __init__(self, object_name: str, message: str) -> None:
        self.object_name = object_name
        super().__init__(f"Unable to describe object '{object_name}': {message}")


class FieldAccessError(ForceMapError):
    """Raised when a declared source path does not exist on a structured value.

    Unreachable for well-formed record declarations.
    """

    def __init__(self, path: str, segment: str) -> None:
        self.path = path
        self.segment = segment
        super().__init__(f"Source path '{path}' has no segment '{segment}'")


class TransportError(ForceMapError):
    """Base exception for Force.com API transport failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ApiUnavailableError(TransportError):
    """Raised when the Force.com API cannot be reached."""


class ApiTimeoutError(ApiUnavailableError):
    """Raised when a request to the Force.com API times out."""


class ApiResponseError(TransportError):
    """Raised when the Force.com API returns an error response.

    The API reports errors as a list of ``{message, errorCode, fields}``
    objects; they are kept verbatim in ``errors``.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.errors = errors or []
        super().__init__(message, status_code=status_code)

    @property
    def error_codes(self) -> list[str]:
        """Error codes reported by the API, in response order."""
        return [str(e["errorCode"]) for e in self.errors if "errorCode" in e]
