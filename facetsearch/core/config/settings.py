"""Settings for facetsearch, loaded from FACETSEARCH_* environment variables."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from facetsearch.core.config.enums import Environment


class Settings(BaseSettings):
    """Process-wide settings.

    Env vars use the FACETSEARCH_ prefix:
        FACETSEARCH_API_BASE_URL=https://api.openalex.org
        FACETSEARCH_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="FACETSEARCH_",
        extra="ignore",
    )

    ENVIRONMENT: Environment = Field(Environment.LOCAL, description="Deployment environment")
    LOG_LEVEL: str = Field("INFO", description="Root log level for facetsearch loggers")

    API_BASE_URL: str = Field("https://api.openalex.org", description="Search API base URL")
    ENTITY_URL_PREFIX: str = Field(
        "https://openalex.org/", description="Canonical prefix stripped from entity ids"
    )
    API_MAILTO: Optional[str] = Field(
        None, description="Contact email sent as mailto= to join the polite pool"
    )
    API_TIMEOUT_SECONDS: float = Field(30.0, gt=0, description="Per-request timeout")
    API_MAX_RETRIES: int = Field(5, ge=1, description="Attempts per request (incl. the first)")

    FACET_CONFIG_PATH: Optional[str] = Field(
        None, description="Override path for the facet configuration YAML"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("API_BASE_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
