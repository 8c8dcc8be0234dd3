"""
Runtime settings with pydantic-settings.
Everything is optional; defaults produce a working synthesizer.
"""

from datetime import datetime
from typing import Optional, Literal
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow"
    )

    # Core runtime settings
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Logging level")

    # Synthesizer
    SYNTH_CONFIG_PATH: str = Field(default="config.yaml", description="YAML file with preset overrides")
    SYNTH_SEED: Optional[int] = Field(default=None, description="Seed for the default random source")
    SYNTH_DEFAULT_VOLATILITY: float = Field(
        default=0.15, gt=0.0, description="Volatility used when the caller's value is missing or NaN"
    )
    SYNTH_TZ: Optional[str] = Field(default=None, description="Timezone for 'now' (host local zone if unset)")

    def has_seed(self) -> bool:
        """Check if a fixed seed is configured."""
        return self.SYNTH_SEED is not None

    def local_now(self) -> datetime:
        """
        Return the current time as a tz-aware datetime.
        Uses SYNTH_TZ when set, otherwise the host's local zone.
        """
        if self.SYNTH_TZ:
            return datetime.now(ZoneInfo(self.SYNTH_TZ))
        return datetime.now().astimezone()


# Global settings instance
settings = Settings()
