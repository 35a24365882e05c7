"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from snapshot_worker.types import DEFAULT_TILE_SIZE


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    dev_mode: bool = True  # Human-readable logs and no production log files

    # Rendering
    default_tile_size: int = DEFAULT_TILE_SIZE  # Used when a request sends tileSize <= 0
    max_tile_size: int = 4096  # Larger requests are rejected before allocation
    supersample: int = 4  # Anti-aliasing factor, 1 disables it
    optimize_png: bool = False

    # Logging
    log_json: bool = False
    log_file: str | None = None
    error_log_file: str | None = None


settings = Settings()
