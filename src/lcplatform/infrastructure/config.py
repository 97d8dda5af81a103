"""Configuration management for the DataStore mock engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataStoreConfig(BaseModel):
    """Engine behaviour configuration.

    The defaults reproduce the reference mock engine. The alternative
    values are opt-in behaviour changes.
    """

    snapshot_mode: Literal["shallow", "deep"] = Field(
        default="shallow",
        description="Transaction snapshot depth: 'shallow' shares row objects with the live store",
    )
    id_strategy: Literal["row_count", "monotonic"] = Field(
        default="row_count",
        description="Synthetic id assignment: row count + 1, or a per-table counter",
    )
    migration_conflict: Literal["ignore", "error"] = Field(
        default="ignore",
        description="What to do when an applied version is re-supplied with different 'up' text",
    )
    default_table: str = Field(
        default="default",
        min_length=1,
        description="Table name used when none can be resolved from the statement",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(
        default="lcplatform-datastore", description="Service name for tracing"
    )
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port (disabled if unset)"
    )


class Config(BaseSettings):
    """Main configuration for the DataStore mock engine."""

    model_config = SettingsConfigDict(
        env_prefix="LCPLATFORM_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    datastore: DataStoreConfig = Field(default_factory=DataStoreConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
