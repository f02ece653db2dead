"""ffmpeg binary configuration, read from FFMPEG_* environment variables."""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class FFMpegConfig(BaseSettings):
    """Where to find ffmpeg and how many threads it uses by default.

    FFMPEG_BINARY and FFMPEG_THREADS override the defaults; a .env file in
    the working directory is read as well.
    """

    model_config = SettingsConfigDict(
        env_prefix="FFMPEG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    binary: str = "ffmpeg"
    # None lets ffmpeg pick the thread count
    threads: Optional[int] = Field(default=None, ge=0)

    def get_binary(self) -> str:
        return self.binary

    def get_threads(self) -> Optional[int]:
        return self.threads


# In-memory cache of the config
_cached_config: Optional[FFMpegConfig] = None


def get_config() -> FFMpegConfig:
    """Get the ffmpeg config, loading it from the environment once."""
    global _cached_config

    if _cached_config is None:
        _cached_config = FFMpegConfig()
        logger.info(
            "Loaded ffmpeg config: binary=%s, threads=%s",
            _cached_config.binary,
            _cached_config.threads,
        )
    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached config (forces reload)."""
    global _cached_config
    _cached_config = None
    logger.debug("ffmpeg config cache cleared")
