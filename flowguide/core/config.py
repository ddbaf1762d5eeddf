"""Application configuration using Pydantic Settings.

Environment variables are loaded from .env files and system environment.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from flowguide.services.workflow.types import DEFAULT_BRANCHING_NODE_TYPES, BuildOrderOptions


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "FlowGuide API"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v: Any) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return v
        return ["http://localhost:3000"]

    # Build order engine
    MAX_WORKFLOW_NODES: int = Field(default=500, ge=1)
    FALLBACK_ITERATION_FACTOR: int = Field(default=2, ge=1)
    BRANCHING_NODE_TYPES: Annotated[list[str], NoDecode] = list(DEFAULT_BRANCHING_NODE_TYPES)

    @field_validator("BRANCHING_NODE_TYPES", mode="before")
    @classmethod
    def parse_branching_node_types(cls, v: Any) -> list[str]:
        """Parse BRANCHING_NODE_TYPES from comma-separated string or list."""
        if isinstance(v, str):
            return [node_type.strip() for node_type in v.split(",") if node_type.strip()]
        return v

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # Defaults to logs/app.log
    LOG_JSON_FORMAT: bool = True
    LOG_SENSITIVE_FILTER: bool = True  # Redact credentials found in node parameters

    def build_order_options(self, *, include_connection_info: bool = True) -> BuildOrderOptions:
        """Engine options derived from these settings."""
        return BuildOrderOptions(
            branching_node_types=tuple(self.BRANCHING_NODE_TYPES),
            fallback_iteration_factor=self.FALLBACK_ITERATION_FACTOR,
            include_connection_info=include_connection_info,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are cached after first load for performance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
