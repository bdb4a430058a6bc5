"""
Library settings using Pydantic.

Settings are loaded from environment variables with .env file support,
e.g. LOTTIEKIT_DEBUG=1 or LOTTIEKIT_PARSER__DEFAULT_SCALE=2.0.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserSettings(BaseSettings):
    """Composition parser settings."""

    # Density scale used when the host does not pass one
    default_scale: float = Field(default=1.0, gt=0.0)

    # More image layers than this in one layer list triggers an advisory warning
    image_layer_warning_threshold: int = Field(default=5, ge=0)

    # Exports older than this get a permanent version warning
    min_supported_version: tuple[int, int, int] = (4, 5, 0)


class LoaderSettings(BaseSettings):
    """Background loading settings."""

    max_workers: int = Field(default=2, ge=1)
    thread_name_prefix: str = "lottiekit-loader"

    # Seconds LoadTask.wait() blocks by default
    wait_timeout: float = 30.0


class Settings(BaseSettings):
    """Main library settings."""

    model_config = SettingsConfigDict(
        env_prefix="LOTTIEKIT_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    parser: ParserSettings = Field(default_factory=ParserSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
