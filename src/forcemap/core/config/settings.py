"""Configuration using Pydantic Settings with YAML support.

Values are loaded from (highest priority first):
1. Arguments passed to ``Settings()``
2. Environment variables (nested with ``__``, e.g. ``FORCE_API__TIMEOUT=5``)
3. ``.env`` file (secrets)
4. YAML files in ``config/base/`` merged with ``config/environments/{APP_ENV}/``
5. Defaults declared here
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class AppSettings(BaseModel):
    """Library identity settings."""

    name: str = "forcemap"
    version: str = "0.1.0"
    debug: bool = False


class ForceApiSettings(BaseModel):
    """Force.com REST API transport settings."""

    instance_url: str | None = None
    api_version: str = "v59.0"
    timeout: float = 30.0

    @field_validator("api_version")
    @classmethod
    def _prefix_version(cls, v: str) -> str:
        return v if v.startswith("v") else f"v{v}"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: str | None = None


class Settings(BaseSettings):
    """Settings for the mapping engine and its Force.com transport."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    force_api: ForceApiSettings = ForceApiSettings()
    logging: LoggingSettings = LoggingSettings()

    # Secrets (env / .env only)
    FORCE_ACCESS_TOKEN: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source below env and .env."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def data_url(self) -> str | None:
        """Versioned REST root, e.g. ``https://x.my.salesforce.com/services/data/v59.0``."""
        if not self.force_api.instance_url:
            return None
        base = self.force_api.instance_url.rstrip("/")
        return f"{base}/services/data/{self.force_api.api_version}"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
