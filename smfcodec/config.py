"""smfcodec runtime configuration.

All settings are prefixed with ``SMF_`` (e.g. ``SMF_LOG_LEVEL=DEBUG``).
Defaults work without any env vars set.  The library modules never read
settings; only the ``smf`` command line does.
"""
from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smfcodec.constants import DEFAULT_PPQ

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class SmfSettings(BaseSettings):
    """Settings for the ``smf`` command line."""

    model_config = SettingsConfigDict(env_prefix="SMF_")

    log_level: str = "WARNING"
    default_ppq: int = Field(default=DEFAULT_PPQ, ge=1, le=0x7FFF)
    json_indent: int = Field(default=2, ge=0)

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level


def get_settings() -> SmfSettings:
    """Build settings from the current environment."""
    return SmfSettings()
