"""Parsers for ffmpeg banner text and progress batches."""

from ffprogress.parsing.metadata import (
    BannerScanner,
    banner_complete,
    extract_details,
    scan_metadata_duration,
)
from ffprogress.parsing.progress import ProgressBatcher, decode_progress
from ffprogress.parsing.timecode import human_time_to_ms
from ffprogress.parsing.tokens import (
    parse_bitrate,
    parse_duration,
    parse_fps,
    parse_resolution,
    parse_start,
)

__all__ = [
    "BannerScanner",
    "ProgressBatcher",
    "banner_complete",
    "decode_progress",
    "extract_details",
    "human_time_to_ms",
    "parse_bitrate",
    "parse_duration",
    "parse_fps",
    "parse_resolution",
    "parse_start",
    "scan_metadata_duration",
]
