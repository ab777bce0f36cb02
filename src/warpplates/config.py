"""Plugin configuration."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Process settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WARPPLATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///warpplates.sqlite"

    # Durable warpplate settings file (see WarpplatesConfig)
    config_path: str = "warpplates.json"

    # World units per tile, used when teleporting to a warpplate origin
    tile_size: int = 16

    # Scheduler sweeps at most once per this many seconds
    sweep_interval_seconds: float = 1.0
    # Host tick rate for the stand-alone update loop
    update_interval_seconds: float = 1 / 60

    # Logging
    log_level: str = "info"


class WarpplatesConfig(BaseModel):
    """Warpplate settings persisted as JSON next to the server data."""

    model_config = {"extra": "ignore"}

    warpplate_cooldown: int = Field(
        default=5,
        ge=0,
        description="Seconds that need to pass until a player may use a warpplate again",
    )
    max_warpplate_width: int = Field(default=5, ge=1, description="Maximum warpplate width")
    max_warpplate_height: int = Field(default=5, ge=1, description="Maximum warpplate height")

    @classmethod
    def read_or_create(cls, path: str | Path) -> "WarpplatesConfig":
        """Read the configuration from ``path``, or write the defaults there if it doesn't exist."""
        path = Path(path)
        if path.exists():
            return cls.model_validate_json(path.read_text(encoding="utf-8"))

        config = cls()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Created default warpplate configuration at %s", path)
        return config


settings = Settings()
