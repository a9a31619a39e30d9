"""Application configuration using Pydantic Settings with YAML support.

Settings are grouped into nested sections loaded from YAML, with secrets
and ad-hoc overrides coming from environment variables. The analysis
thresholds and queue sizing are read once at startup and treated as
immutable for the lifetime of the process.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class HybridRemoteFailurePolicy(StrEnum):
    """What the router does when the remote scorer fails on the hybrid branch.

    - FAIL: surface the failure; the job ends FAILED
    - DEGRADE: fall back to the local result, tagged ML
    """

    FAIL = "fail"
    DEGRADE = "degrade"


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "SafeScan Analysis Service"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/safescan"
    cors_origins: list[str] = []
    user_id_header: str = "X-User-ID"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: str | None = None


class AnalysisThresholds(BaseModel):
    """Confidence cut-offs that pick the router branch.

    Both comparisons are strict: a confidence exactly equal to ``high``
    takes the hybrid branch, exactly ``medium`` goes remote-only.
    """

    model_config = ConfigDict(frozen=True)

    high_confidence: float = Field(default=0.8, ge=0.0, le=1.0)
    medium_confidence: float = Field(default=0.6, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_order(self) -> AnalysisThresholds:
        if self.medium_confidence >= self.high_confidence:
            msg = (
                "medium_confidence must be below high_confidence "
                f"({self.medium_confidence} >= {self.high_confidence})"
            )
            raise ValueError(msg)
        return self


class AnalysisSettings(BaseModel):
    """Hybrid router configuration."""

    thresholds: AnalysisThresholds = AnalysisThresholds()
    remote_timeout: float = Field(default=30.0, gt=0)
    hybrid_remote_failure: HybridRemoteFailurePolicy = HybridRemoteFailurePolicy.FAIL


class QueueSettings(BaseModel):
    """In-process job queue sizing and retention."""

    max_workers: int = Field(default=4, ge=1)
    max_pending: int = Field(default=1000, ge=1)
    retention_seconds: int = Field(default=3600, ge=0)
    cleanup_interval_seconds: float = Field(default=600.0, gt=0)


class LocalModelSettings(BaseModel):
    """Local scorer model artifact location."""

    path: str = "models/safescan-local.json"


class GroqSettings(BaseModel):
    """Groq LLM service configuration."""

    url: str = "https://api.groq.com/openai/v1"
    model: str = "llama-3.1-8b-instant"
    timeout: float = 9.0
    max_retries: int = 2
    requests_per_minute: float = 30.0


class LLMSettings(BaseModel):
    """Remote scorer (LLM) configuration."""

    enabled: bool = True
    groq: GroqSettings = GroqSettings()


class ProductLookupSettings(BaseModel):
    """Barcode product lookup (Open Food Facts) configuration."""

    base_url: str = "https://world.openfoodfacts.org"
    timeout: float = 10.0
    user_agent: str = "SafeScan/0.1 (https://github.com/safescan)"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest):
    1. Values passed to ``Settings()``
    2. Environment variables
    3. .env file
    4. Environment-specific YAML files (config/environments/{APP_ENV}/)
    5. Base YAML files (config/base/)
    6. Defaults in code

    Nested values can be overridden with the '__' delimiter, e.g.
    ``QUEUE__MAX_WORKERS=8``.
    """

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
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    queue: QueueSettings = QueueSettings()
    local_model: LocalModelSettings = LocalModelSettings()
    llm: LLMSettings = LLMSettings()
    product_lookup: ProductLookupSettings = ProductLookupSettings()

    # Secrets (env / .env only, never in YAML)
    GROQ_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the YAML source between .env and file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_non_production(self) -> bool:
        """Local, test and development environments expose API docs."""
        return self.APP_ENV in ("local", "test", "development")

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
