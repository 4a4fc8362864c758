"""Single-field extractors for ffmpeg banner text.

Each function searches an arbitrary chunk of accumulated output and returns
the first match. None means the field has not (yet) appeared.
"""

import re

from ffprogress.models.details import Resolution
from ffprogress.models.errors import ParseError
from ffprogress.parsing.timecode import human_time_to_ms

DURATION_RE = re.compile(r"duration:\s*((?:\d+:?){1,3}\.\d+)", re.IGNORECASE)
START_RE = re.compile(r"start:\s*(-?\d+\.\d+)", re.IGNORECASE)
RESOLUTION_RE = re.compile(r"([1-9][0-9]*)x([1-9][0-9]*)")
FPS_RE = re.compile(r"(\d+(?:\.\d+)?) fps", re.IGNORECASE)
BITRATE_RE = re.compile(r"bitrate:\s*(\d+)(?:\s?([kmgt])?\s?b/s)?", re.IGNORECASE)

_UNIT_POWER = {"k": 1, "m": 2, "g": 3, "t": 4}


def parse_duration(text: str) -> int | None:
    """Total duration in milliseconds from ``Duration: HH:MM:SS.ff``."""
    match = DURATION_RE.search(text)
    if not match:
        return None
    return human_time_to_ms(match.group(1))


def parse_start(text: str) -> float | None:
    """Start offset in milliseconds from ``start: <seconds>``; may be negative."""
    match = START_RE.search(text)
    if not match:
        return None
    return float(match.group(1)) * 1000


def parse_resolution(text: str) -> Resolution:
    """First ``WIDTHxHEIGHT`` pair in the text.

    Raises ParseError when there is none; check with ``has_resolution`` first.
    """
    match = RESOLUTION_RE.search(text)
    if not match:
        raise ParseError("No resolution found in output", details={"text": text[-200:]})
    return Resolution(width=int(match.group(1)), height=int(match.group(2)))


def has_resolution(text: str) -> bool:
    return RESOLUTION_RE.search(text) is not None


def parse_fps(text: str) -> float | None:
    """Frame rate from ``<float> fps``."""
    match = FPS_RE.search(text)
    if not match:
        return None
    return float(match.group(1))


def parse_bitrate(text: str) -> float | None:
    """Average bitrate in kbit/s from ``bitrate: <int> [kmgt]b/s``.

    Unit prefixes are binary (k = 1024) and a bare value is bits/s.
    """
    match = BITRATE_RE.search(text)
    if not match:
        return None

    value = int(match.group(1))
    unit = (match.group(2) or "").lower()
    value *= 1024 ** _UNIT_POWER.get(unit, 0)
    return value / 1024
