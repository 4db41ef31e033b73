"""Configuration management for aoshell."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

BUNDLED_BLUEPRINTS = Path(__file__).parent / "blueprints"


class Settings(BaseSettings):
    """Application settings."""

    # Remote gateway
    gateway_url: str = Field(default="http://localhost:8734", description="Base URL of the process gateway")
    evaluation_timeout: float = Field(default=60.0, description="Seconds to wait for one evaluation result")
    result_poll_seconds: float = Field(default=0.5, description="Delay between result polls")

    # Session
    wallet_path: Path = Field(default=Path("~/.aos.json"), description="JSON web key used to sign messages")
    process_name: str = Field(default="default", description="Name of the process to register or bind")
    monitor_poll_seconds: float = Field(default=2.0, description="Live feed poll interval")
    blueprints_dir: Path = Field(default=BUNDLED_BLUEPRINTS, description="Directory holding blueprint sources")

    # Diagnostics
    debug: bool = Field(
        default=False,
        validation_alias=AliasChoices("AOS_DEBUG", "DEBUG"),
        description="Echo raw evaluation payloads",
    )
    log_level: str = Field(default="WARNING", description="Log level")

    class Config:
        """Pydantic configuration."""

        env_prefix = "AOS_"
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def resolve_wallet(self) -> Path:
        return self.wallet_path.expanduser()


def load_settings(**overrides: object) -> Settings:
    """Build settings from the environment, then apply non-empty overrides."""
    settings = Settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
