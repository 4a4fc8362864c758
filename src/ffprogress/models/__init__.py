"""Data models for ffprogress."""

from ffprogress.models.details import FileDetails, Resolution
from ffprogress.models.errors import (
    FailureKind,
    FFProgressError,
    ParseError,
    ProcessLaunchError,
    TranscodeError,
)
from ffprogress.models.progress import ProgressSnapshot, PsnrFigures
from ffprogress.models.session import SessionOptions, SessionState

__all__ = [
    "FFProgressError",
    "FailureKind",
    "FileDetails",
    "ParseError",
    "ProcessLaunchError",
    "ProgressSnapshot",
    "PsnrFigures",
    "Resolution",
    "SessionOptions",
    "SessionState",
    "TranscodeError",
]
