"""Session options and lifecycle models."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from ffprogress.config import get_settings


class SessionState(StrEnum):
    """Lifecycle states of a transcode session."""

    RUNNING = "running"
    TERMINATING = "terminating"
    CLOSED = "closed"


def _default_cmd() -> str:
    return get_settings().ffmpeg_cmd


def _default_hide_banner() -> bool:
    return get_settings().hide_banner


def _default_max_memory() -> int | None:
    return get_settings().max_memory


class SessionOptions(BaseModel):
    """Per-session configuration; unset values fall back to Settings."""

    cmd: str = Field(default_factory=_default_cmd, min_length=1)
    cwd: str | None = Field(default=None, description="Working directory, defaults to current")
    env: dict[str, str] | None = Field(default=None, description="Environment, defaults to inherited")
    duration: int | None = Field(
        default=None, gt=0, description="Total duration in ms, overrides parsed durations"
    )
    hide_banner: bool = Field(default_factory=_default_hide_banner)
    max_memory: int | None = Field(
        default_factory=_default_max_memory, description="Resident memory ceiling in bytes"
    )
    capture_stdout: bool = True

    @field_validator("max_memory")
    @classmethod
    def normalize_unbounded(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            return None
        return v
