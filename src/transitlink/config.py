"""Settings for transitlink.

Uses pydantic-settings so every option can come from the environment
(prefixed with TRANSITLINK_), a .env file, or direct instantiation.
CLI flags override whatever is loaded here.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TransitlinkSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TRANSITLINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    topology_file: Path = Field(
        default=Path("examples/topology.yml"),
        description="Path to topology YAML file",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level",
    )

    max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Concurrent create calls per dependency generation",
    )

    check_overlaps: bool = Field(
        default=False,
        description="Reject topologies whose network address blocks overlap",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper


def get_settings() -> TransitlinkSettings:
    """Load settings from the environment."""
    return TransitlinkSettings()
