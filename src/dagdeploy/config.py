"""Orchestrator settings and logging setup.

Settings come from ``DAGDEPLOY_*`` environment variables or a ``.env`` file
and choose the failure policy and the log levels used for a run.
"""
import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["FailurePolicy", "OrchestratorSettings", "get_settings", "configure_logging"]


class FailurePolicy(str, Enum):
    """What the executor does after a component fails to deploy."""

    HALT = "halt"
    SKIP_DEPENDENTS = "skip_dependents"


class OrchestratorSettings(BaseSettings):
    """Orchestrator settings, read from ``DAGDEPLOY_*`` environment variables or ``.env``"""

    model_config = SettingsConfigDict(
        env_prefix="DAGDEPLOY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.HALT,
        description="halt: stop at the first failure; skip_dependents: skip only components depending on it",
    )
    log_level: str = Field(default="INFO", description="Level for the dagdeploy logger")
    event_log_level: str = Field(default="INFO", description="Level for logged progress events")

    @field_validator("log_level", "event_log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown logging level: {v}")
        return level

    @property
    def event_level(self) -> int:
        return logging.getLevelName(self.event_log_level)


@lru_cache()
def get_settings() -> OrchestratorSettings:
    """Get cached settings instance"""
    return OrchestratorSettings()


def configure_logging(settings: OrchestratorSettings):
    """Apply the configured level to the ``dagdeploy`` logger hierarchy."""
    logging.getLogger("dagdeploy").setLevel(settings.log_level)
