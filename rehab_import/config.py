"""Configuration management for the import reconciliation engine."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REHAB_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Match classification
    confident_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Top suggestion confidence at or above which a match is confident",
    )

    # Patient matching
    patient_suggest_threshold: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Minimum similarity score for auto-suggesting a patient",
    )
    patient_filter_threshold: int = Field(
        default=20,
        ge=0,
        description="Combined score an entry must exceed to stay in patient search results",
    )

    # Import request
    default_sets: int = Field(
        default=3,
        ge=1,
        description="Sets assigned to created exercises that carry no set count",
    )
    imported_set_name: str = Field(
        default="Imported exercises",
        description="Name of the set built from all imported exercises",
    )

    # Review event log
    event_log_enabled: bool = Field(
        default=False,
        description="Write applied review commands to JSON Lines files",
    )
    event_log_dir: Path = Field(
        default=Path("./data/logs"),
        description="Directory for review event logs",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
