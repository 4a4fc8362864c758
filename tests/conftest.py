"""Shared test fixtures and sample ffmpeg output."""

import pytest

from ffprogress.models.session import SessionOptions
from ffprogress.session.state import TranscodeSession

BANNER = """ffmpeg version 6.1.1 Copyright (c) 2000-2023 the FFmpeg developers
Input #0, mov,mp4,m4a,3gp,3g2,mj2, from 'input.mp4':
  Metadata:
    major_brand     : isom
  Duration: 00:02:34.31, start: 0.023220, bitrate: 2500 kb/s
  Stream #0:0[0x1](und): Video: h264 (High) (avc1 / 0x31637661), yuv420p, 1280x720 [SAR 1:1 DAR 16:9], 2366 kb/s, 29.97 fps, 29.97 tbr, 30k tbn (default)
  Stream #0:1[0x2](und): Audio: aac (LC) (mp4a / 0x6134706D), 44100 Hz, stereo, fltp, 128 kb/s (default)
"""

PROGRESS_BATCH = [
    "frame=100",
    "fps=25.00",
    "stream_0_0_q=28.0",
    "bitrate= 512.0kbits/s",
    "total_size=262144",
    "out_time_us=4000000",
    "out_time_ms=4000000",
    "out_time=00:00:04.000000",
    "dup_frames=1",
    "drop_frames=2",
    "speed=2.0x",
    "progress=continue",
]


class FakeTerminator:
    """Records signals a session asks to send."""

    def __init__(self):
        self.signals: list[str] = []

    def __call__(self, signal: str) -> None:
        self.signals.append(signal)


@pytest.fixture
def banner():
    return BANNER


@pytest.fixture
def progress_batch():
    return list(PROGRESS_BATCH)


@pytest.fixture
def terminator():
    return FakeTerminator()


@pytest.fixture
def make_session(terminator):
    """Build a TranscodeSession wired to the fake terminator."""

    def _make(args=None, **option_overrides):
        options = SessionOptions(cmd="ffmpeg", **option_overrides)
        return TranscodeSession(args or ["-i", "input.mp4", "out.mkv"], options, terminate=terminator)

    return _make


@pytest.fixture
def recorder():
    """Collect emitted events as (name, payload) tuples."""
    events = []

    def _listen(session):
        session.on("raw", lambda text: events.append(("raw", text)))
        session.on("details", lambda d: events.append(("details", d)))
        session.on("progress", lambda p: events.append(("progress", p)))
        session.on("end", lambda code, signal: events.append(("end", (code, signal))))
        return events

    return _listen
