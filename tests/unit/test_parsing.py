"""Tests for the token parsers and time codec."""

import pytest

from ffprogress.models.errors import ParseError
from ffprogress.parsing.timecode import human_time_to_ms
from ffprogress.parsing.tokens import (
    has_resolution,
    parse_bitrate,
    parse_duration,
    parse_fps,
    parse_resolution,
    parse_start,
)


class TestHumanTimeToMs:
    def test_full_time(self):
        assert human_time_to_ms("00:02:34.31") == 154310

    def test_hours(self):
        assert human_time_to_ms("01:00:00.00") == 3_600_000

    def test_minutes_and_seconds_only(self):
        assert human_time_to_ms("02:34.31") == 154310

    def test_seconds_only(self):
        assert human_time_to_ms("34.31") == 34310

    def test_microsecond_fraction(self):
        assert human_time_to_ms("00:00:04.000000") == 4000

    def test_single_digit_fraction(self):
        assert human_time_to_ms("00:00:01.5") == 1500

    def test_no_fraction(self):
        assert human_time_to_ms("00:01:02") == 62000

    def test_negative(self):
        assert human_time_to_ms("-00:00:01.00") == -1000

    def test_not_a_time(self):
        assert human_time_to_ms("N/A") is None


class TestParseDuration:
    def test_header(self, banner):
        assert parse_duration(banner) == 154310

    def test_case_insensitive(self):
        assert parse_duration("DURATION: 00:01:00.00") == 60000

    def test_absent(self):
        assert parse_duration("Stream #0:0: Video: h264") is None

    def test_not_available(self):
        assert parse_duration("Duration: N/A, start: 0.000000") is None


class TestParseStart:
    def test_start(self, banner):
        assert parse_start(banner) == pytest.approx(23.22)

    def test_negative_start(self):
        assert parse_start("start: -1.500000") == pytest.approx(-1500.0)

    def test_absent(self):
        assert parse_start("Duration: 00:00:01.00") is None


class TestParseResolution:
    def test_embedded(self):
        res = parse_resolution("Video: h264, yuv420p, 1920x1080 [SAR 1:1], 30 fps")
        assert (res.width, res.height) == (1920, 1080)

    def test_skips_hex_codec_tag(self, banner):
        res = parse_resolution(banner)
        assert (res.width, res.height) == (1280, 720)

    def test_no_leading_zero(self):
        assert not has_resolution("0x0 and 01x02")

    def test_missing_raises(self):
        with pytest.raises(ParseError):
            parse_resolution("Audio: aac, 44100 Hz")

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_resolution("")


class TestParseFps:
    def test_fractional(self, banner):
        assert parse_fps(banner) == pytest.approx(29.97)

    def test_integer(self):
        assert parse_fps("1920x1080, 30 fps") == 30.0

    def test_absent(self):
        assert parse_fps("Audio: aac") is None


class TestParseBitrate:
    def test_kilobits(self):
        assert parse_bitrate("bitrate: 1000kb/s") == 1000.0

    def test_kilobits_with_space(self):
        assert parse_bitrate("bitrate: 128 kb/s") == 128.0

    def test_megabits(self):
        assert parse_bitrate("bitrate: 1m b/s") == 1024.0

    def test_gigabits(self):
        assert parse_bitrate("bitrate: 1 gb/s") == 1024.0**2

    def test_bits(self):
        assert parse_bitrate("bitrate: 2048 b/s") == 2.0

    def test_absent(self):
        assert parse_bitrate("Duration: 00:00:01.00") is None

    def test_not_available(self):
        assert parse_bitrate("bitrate: N/A") is None

    def test_progress_line_not_matched(self):
        assert parse_bitrate("size= 256kB time=00:00:05.00 bitrate= 419.4kbits/s") is None
