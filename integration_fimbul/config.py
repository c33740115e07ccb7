from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_NGSILD_CONTEXT = (
    "https://raw.githubusercontent.com/diwise/context-broker/main/assets/"
    "jsonldcontexts/default-context.jsonld"
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = Field("integration-fimbul")
    log_level: str = Field("INFO")

    fimbul_url: str = Field(
        ...,
        validation_alias=AliasChoices("FIMBUL_URL", "fimbul_url"),
    )
    fimbul_timeout_seconds: float = Field(10.0)

    context_broker_url: str = Field(
        ...,
        validation_alias=AliasChoices("CONTEXT_BROKER_URL", "context_broker_url"),
    )
    broker_timeout_seconds: float = Field(10.0)
    broker_tenant: str | None = Field(default=None)
    broker_debug: bool = Field(False)
    ngsild_context: str = Field(DEFAULT_NGSILD_CONTEXT)

    station_ids: str = Field("")
    entity_prefix_ending: str = Field(
        ...,
        validation_alias=AliasChoices("ENTITY_PREFIX_ENDING", "entity_prefix_ending"),
    )
    station_pause_seconds: float = Field(1.0)
    apply_clock_skew_correction: bool = Field(True)

    @field_validator("fimbul_timeout_seconds", "broker_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeouts must be > 0")
        return value

    @field_validator("station_pause_seconds")
    @classmethod
    def validate_pause(cls, value: float) -> float:
        if value < 0:
            raise ValueError("station_pause_seconds must be >= 0")
        return value

    @field_validator("fimbul_url", "context_broker_url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("url cannot be blank")
        return value.strip()

    @property
    def station_id_list(self) -> List[str]:
        return parse_station_ids(self.station_ids)


def parse_station_ids(raw: str) -> List[str]:
    """Split a comma separated station list, dropping blank entries."""

    return [part.strip() for part in raw.split(",") if part.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings", "parse_station_ids", "DEFAULT_NGSILD_CONTEXT"]
