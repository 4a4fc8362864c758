"""Decoding of ffmpeg ``-progress`` key=value batches."""

import logging
import math
import re

from ffprogress.models.progress import ProgressSnapshot, PsnrFigures
from ffprogress.parsing.timecode import human_time_to_ms

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

_QUALITY_KEY_RE = re.compile(r"^stream_(\d+)_(\d+)_q$")
_PSNR_KEY_RE = re.compile(r"^stream_(\d+)_(\d+)_psnr_(y|u|v|all)$", re.IGNORECASE)
_RATE_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*([kmgt]?)bits/s\s*$", re.IGNORECASE)

_UNIT_POWER = {"": -1, "k": 0, "m": 1, "g": 2, "t": 3}


class ProgressBatcher:
    """Collects progress lines until a ``progress=`` sentinel closes the batch."""

    def __init__(self):
        self._lines: list[str] = []

    def push(self, line: str) -> list[str] | None:
        """Add one line; return the completed batch when the sentinel arrives."""
        line = line.strip()
        if not line:
            return None
        self._lines.append(line)
        if line.startswith("progress="):
            batch, self._lines = self._lines, []
            return batch
        return None

    @property
    def pending(self) -> int:
        return len(self._lines)


def _coerce(value: str) -> float | str:
    try:
        return float(value)
    except ValueError:
        return value


def parse_pairs(lines: list[str]) -> dict[str, float | str]:
    """Split ``key=value`` lines; numeric-looking values become floats."""
    data: dict[str, float | str] = {}
    for line in lines:
        key, sep, value = line.partition("=")
        if not sep:
            logger.debug("Skipping malformed progress line %r", line)
            continue
        data[key.strip()] = _coerce(value.strip())
    return data


def _number(value: float | str | None) -> float | None:
    if value is None or value == NOT_AVAILABLE:
        return None
    if isinstance(value, float):
        return value
    try:
        return float(value)
    except ValueError:
        logger.debug("Unparsable numeric progress value %r", value)
        return None


def _count(value: float | str | None) -> int | None:
    number = _number(value)
    if number is None or math.isnan(number) or math.isinf(number):
        return None
    return int(number)


def parse_speed(value: float | str | None) -> float | None:
    """``2.5x`` -> 2.5; ``N/A`` -> None."""
    if isinstance(value, str):
        value = value.strip().rstrip("xX")
    return _number(value)


def parse_rate(value: float | str | None) -> float | None:
    """Progress bitrate such as ``1234.5kbits/s`` in kbit/s."""
    if value is None or value == NOT_AVAILABLE:
        return None
    if isinstance(value, float):
        return value
    match = _RATE_RE.match(value)
    if not match:
        logger.debug("Unparsable bitrate %r", value)
        return None
    return float(match.group(1)) * 1024 ** _UNIT_POWER[match.group(2).lower()]


def parse_out_time(data: dict[str, float | str]) -> float | None:
    """Output position in milliseconds.

    ``out_time_ms`` carries microseconds just like ``out_time_us``.
    """
    for key in ("out_time_us", "out_time_ms"):
        micros = _number(data.get(key))
        if micros is not None:
            return micros / 1000

    human = data.get("out_time")
    if isinstance(human, str) and human != NOT_AVAILABLE:
        return human_time_to_ms(human)
    return None


def _psnr_value(value: float | str) -> float | None:
    if isinstance(value, str):
        lowered = value.lower()
        if lowered == "inf":
            return math.inf
        if lowered == "nan":
            return math.nan
    return _number(value)


def _collect_stream_figures(data: dict[str, float | str], snapshot: ProgressSnapshot) -> None:
    for key, value in data.items():
        if not key.startswith("stream_"):
            continue

        quality = _QUALITY_KEY_RE.match(key)
        if quality:
            file_index, stream_index = int(quality.group(1)), int(quality.group(2))
            q = _number(value)
            if q is not None:
                snapshot.quality.setdefault(file_index, {})[stream_index] = q
            continue

        psnr = _PSNR_KEY_RE.match(key)
        if psnr:
            file_index, stream_index = int(psnr.group(1)), int(psnr.group(2))
            channel = psnr.group(3).lower()
            figures = snapshot.psnr.setdefault(file_index, {}).setdefault(
                stream_index, PsnrFigures()
            )
            setattr(figures, channel, _psnr_value(value))


def estimate(
    time: float | None, speed: float | None, duration: float | None
) -> tuple[float | None, float | None]:
    """Progress fraction and ETA in milliseconds, both None unless computable."""
    if duration is None or duration <= 0 or time is None or math.isnan(time):
        return None, None
    if speed is None or speed <= 0 or math.isnan(speed):
        return None, None
    progress = time / duration
    eta = max((duration - time) / speed, 0.0)
    return progress, eta


def decode_progress(lines: list[str], duration: float | None) -> ProgressSnapshot:
    """Turn one complete progress batch into a snapshot.

    ``duration`` is the best known total duration in milliseconds. Fields that
    fail to parse are left as None.
    """
    data = parse_pairs(lines)

    time = parse_out_time(data)
    speed = parse_speed(data.get("speed"))
    progress, eta = estimate(time, speed, duration)

    snapshot = ProgressSnapshot(
        frame=_count(data.get("frame")),
        fps=_number(data.get("fps")),
        time=time,
        speed=speed,
        bitrate=parse_rate(data.get("bitrate")),
        size=_number(data.get("total_size")),
        drop=max(_count(data.get("drop_frames")) or 0, 0),
        dup=max(_count(data.get("dup_frames")) or 0, 0),
        progress=progress,
        eta=eta,
    )
    _collect_stream_figures(data, snapshot)

    logger.debug("Decoded progress batch: frame=%s time=%s", snapshot.frame, snapshot.time)
    return snapshot
