"""Conversion of ffmpeg human time strings to milliseconds."""

import re

_TIME_RE = re.compile(r"^\s*(-?)((?:\d+:){0,2}\d+)(?:\.(\d+))?\s*$")


def human_time_to_ms(text: str) -> int | None:
    """Convert ``[[HH:]MM:]SS[.ff]`` to integer milliseconds.

    Missing leading groups count as zero. The fractional part is read as a
    decimal fraction of a second, so ``.31`` is 310 ms and ``.5`` is 500 ms.
    Returns None when the text is not a time value.
    """
    match = _TIME_RE.match(text)
    if not match:
        return None

    sign, clock, fraction = match.groups()
    groups = [int(p) for p in clock.split(":")]
    while len(groups) < 3:
        groups.insert(0, 0)
    hours, minutes, seconds = groups

    ms = hours * 3_600_000 + minutes * 60_000 + seconds * 1000
    if fraction:
        ms += int(fraction[:3].ljust(3, "0"))

    return -ms if sign else ms
