"""
Conversion between chapter tick values and ``H:MM:SS[.fffffff]`` text.

Ticks are 100 ns units, so up to seven fraction digits round-trip exactly.
"""

from __future__ import annotations

import re

from chapterkit.models import TICKS_PER_MILLISECOND, TICKS_PER_SECOND

_FRACTION_DIGITS = 7

DURATION_PATTERN = re.compile(
    r"^(?P<hours>\d+):(?P<minutes>[0-5]?\d):(?P<seconds>[0-5]?\d)"
    r"(?:[.,](?P<fraction>\d{1,7}))?$"
)


def parse_duration(text: str) -> int | None:
    """
    Parse ``H:MM:SS`` with an optional fraction into ticks.

    Examples:
        >>> parse_duration("0:01:30")
        900000000
        >>> parse_duration("1:02:03.5")
        37235000000
        >>> parse_duration("90") is None
        True

    Args:
        text: Duration text

    Returns:
        Ticks, or None if the text is not a duration
    """
    match = DURATION_PATTERN.match(text.strip())
    if not match:
        return None

    seconds = int(match["hours"]) * 3600 + int(match["minutes"]) * 60 + int(match["seconds"])
    fraction = (match["fraction"] or "").ljust(_FRACTION_DIGITS, "0")
    return seconds * TICKS_PER_SECOND + int(fraction)


def format_duration(ticks: int) -> str:
    """
    Format ticks as ``H:MM:SS`` plus the shortest exact fraction.

    Examples:
        >>> format_duration(900000000)
        '0:01:30'
        >>> format_duration(37235000000)
        '1:02:03.5'
    """
    if ticks < 0:
        raise ValueError(f"Duration must be >= 0, got: {ticks}")
    total_seconds, fraction = divmod(ticks, TICKS_PER_SECOND)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    text = f"{hours}:{minutes:02d}:{seconds:02d}"
    if fraction:
        text += "." + f"{fraction:0{_FRACTION_DIGITS}d}".rstrip("0")
    return text


def format_clock(ticks: int | None) -> str:
    """
    Format ticks as zero-padded ``HH:MM:SS.mmm`` for display.

    Always uses leading zeros:
    - 0 -> 00:00:00.000
    - 65.5 s -> 00:01:05.500

    Returns "-" for open-ended times.
    """
    if ticks is None:
        return "-"
    millis = ticks // TICKS_PER_MILLISECOND
    total_seconds, ms = divmod(millis, 1000)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"
