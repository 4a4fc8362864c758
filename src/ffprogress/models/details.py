"""File metadata models."""

from pydantic import BaseModel, Field


class Resolution(BaseModel):
    """Frame size in pixels."""

    model_config = {"frozen": True}

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class FileDetails(BaseModel):
    """Input file metadata read from the tool's startup banner.

    Produced once per session and never mutated afterwards.
    """

    model_config = {"frozen": True}

    duration: int | None = Field(default=None, description="Total duration in milliseconds")
    bitrate: float | None = Field(default=None, description="Average bitrate in kbit/s")
    start: float | None = Field(default=None, description="Start offset in milliseconds")
    resolution: Resolution | None = None
    fps: float | None = Field(default=None, description="Frames per second")
