"""
Configuration management using Pydantic Settings.
Loads from environment variables and .env file.
"""
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_prefix="CRAWLWORTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Engine tables
    engine_config_file: str | None = Field(
        default=None,
        description="Optional JSON file with EngineConfig overrides"
    )

    # Valuation thresholds (USD per access)
    high_value_threshold: float = Field(
        default=20.0,
        ge=0.0,
        description="Detections above this value count as licensing candidates"
    )
    licensing_medium_threshold: float = Field(
        default=5.0,
        ge=0.0,
        description="Values at or above this are medium licensing potential"
    )
    licensing_high_threshold: float = Field(
        default=20.0,
        ge=0.0,
        description="Values at or above this are high licensing potential"
    )

    # Forecasting
    licensing_conversion_rate: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="Share of detected value expected to become licensing revenue"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format"
    )


# Global settings instance
settings = Settings()
