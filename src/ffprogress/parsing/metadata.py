"""One-shot extraction of file metadata from the ffmpeg banner."""

import logging
import re

from ffprogress.models.details import FileDetails
from ffprogress.parsing.timecode import human_time_to_ms
from ffprogress.parsing.tokens import (
    FPS_RE,
    has_resolution,
    parse_bitrate,
    parse_duration,
    parse_fps,
    parse_resolution,
    parse_start,
)

logger = logging.getLogger(__name__)

_DURATION_LINE_RE = re.compile(r"duration\s*:", re.IGNORECASE)
_METADATA_DURATION_RE = re.compile(r"duration\s*:\s*((?:\d+:?){1,3}\.\d+)", re.IGNORECASE)


def banner_complete(text: str) -> bool:
    """Whether both the Duration line and a stream fps marker have arrived.

    The stream lines carrying ``fps`` are printed after ``Duration:``, so once
    both are present the banner fields needed for extraction are complete.
    """
    return bool(_DURATION_LINE_RE.search(text)) and bool(FPS_RE.search(text))


class BannerScanner:
    """Incremental banner detection over a growing stderr buffer.

    Only the newly appended text plus a short tail of what came before is
    searched, so markers split across chunks are still found.
    """

    def __init__(self, tail: int = 128):
        self.tail = tail
        self.duration_seen = False
        self.fps_seen = False

    def window(self, buffer: str, added: int) -> str:
        return buffer[-(added + self.tail):]

    def feed(self, buffer: str, added: int) -> bool:
        """Update with the last ``added`` chars of ``buffer``; True once complete."""
        window = self.window(buffer, added)
        if not self.duration_seen:
            self.duration_seen = bool(_DURATION_LINE_RE.search(window))
        if not self.fps_seen:
            self.fps_seen = bool(FPS_RE.search(window))
        return self.complete

    @property
    def complete(self) -> bool:
        return self.duration_seen and self.fps_seen


def scan_metadata_duration(text: str) -> int | None:
    """Longest ``duration:`` value found in a chunk, in milliseconds.

    Matches both the container ``Duration:`` line and per-stream metadata
    ``DURATION  : 00:01:02.123000000`` entries.
    """
    values = [human_time_to_ms(m) for m in _METADATA_DURATION_RE.findall(text)]
    values = [v for v in values if v is not None]
    return max(values) if values else None


def extract_details(text: str) -> FileDetails:
    """Build FileDetails from the accumulated banner text."""
    resolution = parse_resolution(text) if has_resolution(text) else None
    if resolution is None:
        logger.debug("No resolution in banner, leaving it unset")

    details = FileDetails(
        duration=parse_duration(text),
        bitrate=parse_bitrate(text),
        start=parse_start(text),
        resolution=resolution,
        fps=parse_fps(text),
    )
    logger.debug("Extracted file details: %s", details)
    return details
