"""Settings for the propeller-config command-line tooling.

These configure the tool, not the controller. Loaded from environment
variables with the ``PROPELLER_CONFIG_`` prefix.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CLISettings(BaseSettings):
    """Configuration for the propeller-config CLI.

    Environment Variables:
        PROPELLER_CONFIG_LOG_LEVEL: Logging level name (default: WARNING)
        PROPELLER_CONFIG_OUTPUT_FORMAT: Default output format, text or json
            (default: text)
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPELLER_CONFIG_",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level for the CLI",
    )
    output_format: Literal["text", "json"] = Field(
        default="text",
        description="Output format used when --format is not given",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_cli_settings() -> CLISettings:
    """Get cached CLI settings singleton."""
    return CLISettings()
