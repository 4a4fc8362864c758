"""Application configuration using Pydantic BaseSettings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """ffprogress configuration loaded from environment variables."""

    model_config = {"env_prefix": "FFPROGRESS_", "env_file": ".env", "extra": "ignore"}

    # Tool
    ffmpeg_cmd: str = "ffmpeg"
    hide_banner: bool = False

    # Resource sampling
    vitals_interval_ms: int = 500
    max_memory: int | None = None

    # Termination
    kill_signal: str = "SIGKILL"
    stop_signal: str = "SIGINT"

    # Output streams
    read_chunk_size: int = 4096


def get_settings() -> Settings:
    """Return a settings instance read from the current environment."""
    return Settings()
