"""Progress snapshot models."""

from pydantic import BaseModel, Field


class PsnrFigures(BaseModel):
    """Per-stream PSNR values; ``inf`` and ``nan`` are kept as floats."""

    y: float | None = None
    u: float | None = None
    v: float | None = None
    all: float | None = None


class ProgressSnapshot(BaseModel):
    """One decoded progress batch."""

    frame: int | None = None
    fps: float | None = None
    time: float | None = Field(default=None, description="Output media position in milliseconds")
    speed: float | None = Field(default=None, description="Encode speed relative to real time")
    bitrate: float | None = Field(default=None, description="Current bitrate in kbit/s")
    size: float | None = Field(default=None, description="Cumulative output size in bytes")
    drop: int = Field(default=0, ge=0)
    dup: int = Field(default=0, ge=0)
    progress: float | None = Field(default=None, description="Fraction of duration done")
    eta: float | None = Field(default=None, ge=0, description="Milliseconds remaining")

    # file index -> stream index -> value
    quality: dict[int, dict[int, float]] = Field(default_factory=dict)
    psnr: dict[int, dict[int, PsnrFigures]] = Field(default_factory=dict)
