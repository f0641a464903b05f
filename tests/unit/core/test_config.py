"""Unit tests for configuration.

Tests cover:
- Settings defaults and YAML layering
- Environment variable overrides
- Computed properties
- YAML merging helpers
"""

from __future__ import annotations

from pathlib import Path

import pytest

from forcemap.core.config import Settings, get_settings
from forcemap.core.config.yaml_source import (
    CONFIG_DIR_ENV,
    MultiYamlConfigSettingsSource,
    deep_merge,
)


pytestmark = pytest.mark.unit


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Tests for Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch):
        """Should load defaults from base YAML."""
        monkeypatch.setenv("APP_ENV", "development")
        settings = Settings()

        assert settings.app.name == "forcemap"
        assert settings.APP_ENV == "development"
        assert settings.app.debug is False
        assert settings.force_api.api_version == "v59.0"
        assert settings.force_api.timeout == 30.0
        assert settings.force_api.instance_url is None
        assert settings.logging.level == "INFO"

    def test_environment_overlay(self, monkeypatch: pytest.MonkeyPatch):
        """Should overlay the environment's YAML on top of base."""
        monkeypatch.setenv("APP_ENV", "test")
        settings = Settings()

        assert settings.APP_ENV == "test"
        assert settings.app.debug is True
        assert settings.app.name == "forcemap"
        assert settings.force_api.instance_url == "https://test.my.salesforce.com"
        assert settings.force_api.timeout == 5.0
        assert settings.force_api.api_version == "v59.0"
        assert settings.logging.format == "text"

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch):
        """Should let nested environment variables win over YAML."""
        monkeypatch.setenv("APP_ENV", "test")
        monkeypatch.setenv("FORCE_API__TIMEOUT", "12.5")
        settings = Settings()

        assert settings.force_api.timeout == 12.5
        assert settings.force_api.instance_url == "https://test.my.salesforce.com"

    def test_access_token_from_env(self, monkeypatch: pytest.MonkeyPatch):
        """Should read the access token from the environment."""
        monkeypatch.setenv("FORCE_ACCESS_TOKEN", "00Dxx!token")
        settings = Settings()

        assert settings.FORCE_ACCESS_TOKEN == "00Dxx!token"

    @pytest.mark.parametrize(("given", "expected"), [("59.0", "v59.0"), ("v60.0", "v60.0")])
    def test_api_version_prefix(self, given: str, expected: str):
        """Should normalize the API version to carry a 'v' prefix."""
        settings = Settings(force_api={"api_version": given})

        assert settings.force_api.api_version == expected


class TestSettingsComputedProperties:
    """Tests for Settings computed properties."""

    def test_data_url(self):
        """Should build the versioned REST root."""
        settings = Settings(
            force_api={
                "instance_url": "https://acme.my.salesforce.com/",
                "api_version": "v59.0",
            }
        )

        assert settings.data_url == "https://acme.my.salesforce.com/services/data/v59.0"

    def test_data_url_without_instance(self):
        """Should be None when no instance is configured."""
        settings = Settings(force_api={"instance_url": None})

        assert settings.data_url is None

    @pytest.mark.parametrize(
        ("env", "is_development", "is_testing"),
        [
            ("development", True, False),
            ("test", False, True),
            ("production", False, False),
        ],
    )
    def test_environment_flags(self, env: str, is_development: bool, is_testing: bool):
        """Should detect the running environment."""
        settings = Settings(APP_ENV=env)

        assert settings.is_development is is_development
        assert settings.is_testing is is_testing


class TestGetSettings:
    """Tests for get_settings()."""

    def test_returns_cached_instance(self):
        """Should return the same instance on repeated calls."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


# =============================================================================
# YAML Source Tests
# =============================================================================


class TestDeepMerge:
    """Tests for deep_merge()."""

    def test_merges_nested_dicts(self):
        """Should merge nested keys instead of replacing the parent."""
        base = {"force_api": {"api_version": "v59.0", "timeout": 30.0}}
        override = {"force_api": {"timeout": 5.0}}

        result = deep_merge(base, override)

        assert result == {"force_api": {"api_version": "v59.0", "timeout": 5.0}}

    def test_does_not_mutate_base(self):
        """Should leave the base dict untouched."""
        base = {"app": {"debug": False}}

        deep_merge(base, {"app": {"debug": True}})

        assert base == {"app": {"debug": False}}

    def test_scalar_replaces_dict(self):
        """Should let a non-dict override replace a dict."""
        assert deep_merge({"a": {"b": 1}}, {"a": None}) == {"a": None}


class TestMultiYamlConfigSettingsSource:
    """Tests for the layered YAML source."""

    @pytest.fixture
    def config_dir(self, tmp_path: Path) -> Path:
        (tmp_path / "base").mkdir()
        (tmp_path / "base" / "force_api.yaml").write_text(
            "force_api:\n  api_version: v58.0\n  timeout: 10.0\n"
        )
        staging = tmp_path / "environments" / "staging"
        staging.mkdir(parents=True)
        (staging / "force_api.yaml").write_text(
            "force_api:\n  instance_url: https://staging.my.salesforce.com\n"
        )
        return tmp_path

    def test_config_dir_override(
        self, monkeypatch: pytest.MonkeyPatch, config_dir: Path
    ):
        """Should read YAML from the directory named in the environment."""
        monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
        monkeypatch.setenv("APP_ENV", "staging")

        data = MultiYamlConfigSettingsSource(Settings)()

        assert data == {
            "force_api": {
                "api_version": "v58.0",
                "timeout": 10.0,
                "instance_url": "https://staging.my.salesforce.com",
            }
        }

    def test_missing_environment_dir(
        self, monkeypatch: pytest.MonkeyPatch, config_dir: Path
    ):
        """Should fall back to base when the environment has no directory."""
        monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
        monkeypatch.setenv("APP_ENV", "production")

        settings = Settings()

        assert settings.force_api.api_version == "v58.0"
        assert settings.force_api.instance_url is None

    def test_get_field_value(self, monkeypatch: pytest.MonkeyPatch, config_dir: Path):
        """Should report top-level sections as complex values."""
        monkeypatch.setenv(CONFIG_DIR_ENV, str(config_dir))
        monkeypatch.setenv("APP_ENV", "staging")
        source = MultiYamlConfigSettingsSource(Settings)

        value, name, is_complex = source.get_field_value(
            Settings.model_fields["force_api"], "force_api"
        )

        assert name == "force_api"
        assert is_complex is True
        assert value["instance_url"] == "https://staging.my.salesforce.com"
