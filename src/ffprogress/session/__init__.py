"""ffmpeg session lifecycle."""

from ffprogress.session.runner import TranscodeRunner
from ffprogress.session.state import TranscodeSession

__all__ = ["TranscodeRunner", "TranscodeSession"]
