"""Unit tests for custom exceptions.

Tests cover:
- Exception hierarchy
- Exception properties and messages
"""

from __future__ import annotations

import pytest

from forcemap.core.exceptions import (
    ApiResponseError,
    ApiTimeoutError,
    ApiUnavailableError,
    FieldAccessError,
    ForceMapError,
    SchemaFetchError,
    TransportError,
)


pytestmark = pytest.mark.unit


class TestHierarchy:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_type",
        [SchemaFetchError, FieldAccessError, TransportError, ApiResponseError],
    )
    def test_all_derive_from_base(self, exc_type: type[Exception]):
        """Should let callers catch everything with ForceMapError."""
        assert issubclass(exc_type, ForceMapError)

    def test_timeout_is_unavailable(self):
        """Should treat timeouts as an unavailable API."""
        assert issubclass(ApiTimeoutError, ApiUnavailableError)
        assert issubclass(ApiUnavailableError, TransportError)


class TestSchemaFetchError:
    """Tests for SchemaFetchError."""

    def test_message_names_object(self):
        """Should include the object name in the message."""
        error = SchemaFetchError("Account", "no metadata for object")

        assert error.object_name == "Account"
        assert str(error) == "Unable to describe object 'Account': no metadata for object"


class TestFieldAccessError:
    """Tests for FieldAccessError."""

    def test_keeps_path_and_segment(self):
        """Should expose the failing path and segment."""
        error = FieldAccessError("customer.nickname", "nickname")

        assert error.path == "customer.nickname"
        assert error.segment == "nickname"
        assert "nickname" in str(error)


class TestTransportErrors:
    """Tests for transport exceptions."""

    def test_unavailable_has_no_status(self):
        """Should carry no status code for connection failures."""
        error = ApiUnavailableError("Connection refused")

        assert error.status_code is None
        assert str(error) == "Connection refused"

    def test_response_error_codes(self):
        """Should list the API's error codes in order."""
        error = ApiResponseError(
            400,
            "Required fields are missing",
            [
                {"message": "Required fields are missing", "errorCode": "REQUIRED_FIELD_MISSING"},
                {"message": "no code"},
                {"message": "Bad value", "errorCode": "INVALID_FIELD"},
            ],
        )

        assert error.status_code == 400
        assert error.error_codes == ["REQUIRED_FIELD_MISSING", "INVALID_FIELD"]

    def test_response_error_defaults(self):
        """Should default to an empty error list."""
        error = ApiResponseError(500, "Internal Server Error")

        assert error.errors == []
        assert error.error_codes == []
