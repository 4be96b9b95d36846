"""Tests for duration parsing and formatting."""

from __future__ import annotations

import pytest

from chapterkit.models import TICKS_PER_MILLISECOND
from chapterkit.timecodes import format_clock, format_duration, parse_duration


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("0:00:00", 0),
            ("0:01:30", 900_000_000),
            ("1:02:03.5", 37_235_000_000),
            ("1:02:03,5", 37_235_000_000),
            ("0:00:00.0000001", 1),
            ("10:5:7", 363_070_000_000),
            ("100:00:00", 3_600_000_000_000),
            (" 0:00:01 ", 10_000_000),
        ],
    )
    def test_valid(self, text: str, expected: int) -> None:
        """Valid durations convert to ticks."""
        assert parse_duration(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "90", "1:30", "0:60:00", "0:00:60", "0:00:00.12345678", "a:bb:cc", "-0:00:01"],
    )
    def test_invalid(self, text: str) -> None:
        """Anything else is not a duration."""
        assert parse_duration(text) is None


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("ticks", "expected"),
        [
            (0, "0:00:00"),
            (900_000_000, "0:01:30"),
            (37_235_000_000, "1:02:03.5"),
            (1, "0:00:00.0000001"),
            (3_600_000_000_000, "100:00:00"),
        ],
    )
    def test_shortest_form(self, ticks: int, expected: str) -> None:
        """Fractions are written only as long as needed."""
        assert format_duration(ticks) == expected

    def test_negative_rejected(self) -> None:
        """Negative durations are invalid."""
        with pytest.raises(ValueError):
            format_duration(-1)

    @pytest.mark.parametrize("ticks", [0, 1, 12_345_678, 630_002_500_000])
    def test_parse_inverts_format(self, ticks: int) -> None:
        """format_duration output parses back to the same ticks."""
        assert parse_duration(format_duration(ticks)) == ticks


class TestFormatClock:
    """Tests for format_clock."""

    def test_zero_padded(self) -> None:
        """Display times are zero-padded with milliseconds."""
        assert format_clock(0) == "00:00:00.000"
        assert format_clock(655_000_000) == "00:01:05.500"
        assert format_clock(37_235_000_000) == "01:02:03.500"

    def test_open_ended(self) -> None:
        """None renders as a dash."""
        assert format_clock(None) == "-"

    def test_sub_millisecond_truncated(self) -> None:
        """Ticks below one millisecond are dropped, not rounded."""
        assert format_clock(TICKS_PER_MILLISECOND - 1) == "00:00:00.000"
        assert format_clock(3 * TICKS_PER_MILLISECOND + 9_999) == "00:00:00.003"
