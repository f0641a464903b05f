"""Shared test fixtures for the forcemap tests.

Provides a stub schema fetcher backed by canned describe documents, a schema
cache and mapper wired to it, and transport settings pointing at a fake
instance URL.
"""

from __future__ import annotations

import pytest

from forcemap.core.config import Settings
from forcemap.mappers import AttributeMapper
from forcemap.schema import SchemaCache
from tests.fixtures.fetchers import StubFetcher
from tests.fixtures.force_api import BASE_URL


@pytest.fixture
def fetcher() -> StubFetcher:
    """Stub fetcher serving the canned describe documents."""
    return StubFetcher()


@pytest.fixture
def schema_cache(fetcher: StubFetcher) -> SchemaCache:
    """Schema cache backed by the stub fetcher."""
    return SchemaCache(fetcher)


@pytest.fixture
def mapper(schema_cache: SchemaCache) -> AttributeMapper:
    """Attribute mapper over the stub-backed cache."""
    return AttributeMapper(schema_cache)


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing the transport at the fake instance."""
    return Settings(
        APP_ENV="test",
        force_api={"instance_url": BASE_URL, "api_version": "v59.0", "timeout": 5.0},
        FORCE_ACCESS_TOKEN="test-access-token",
    )
