"""Worked-duration arithmetic for daily log entries.

Clock strings come straight from forms, so parsing is lenient about format
(``HH:MM`` or ``H:MM AM/PM``) and strict about range. Anything that does not
parse yields a zero duration instead of an error.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

MINUTES_PER_DAY = 24 * 60
HOUR_PLACES = Decimal("0.01")
SIXTY = Decimal(60)

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?:\s*([AaPp][Mm]))?$", re.ASCII)


class BreakWindow(NamedTuple):
    """Unpaid daily interval in minutes since midnight, ``[start, end)``."""

    start: int
    end: int

    @classmethod
    def from_clock(cls, start: str, end: str) -> "BreakWindow":
        start_minutes = parse_clock(start)
        end_minutes = parse_clock(end)
        if start_minutes is None or end_minutes is None or end_minutes < start_minutes:
            raise ValueError(f"Invalid break window {start!r}-{end!r}")
        return cls(start_minutes, end_minutes)


# 12:00 - 13:00
DEFAULT_BREAK = BreakWindow(12 * 60, 13 * 60)


def parse_clock(raw: str | None) -> int | None:
    """Return minutes since midnight for a 24-hour or 12-hour clock string.

    ``None`` when the value is empty, malformed, or out of range (hour 0-23
    without a meridiem, 1-12 with one; minute 0-59).
    """
    if not raw or not isinstance(raw, str):
        return None
    match = _CLOCK_RE.match(raw.strip())
    if not match:
        return None
    hour = int(match.group(1))
    minute = int(match.group(2))
    period = match.group(3)
    if minute > 59:
        return None
    if period:
        if hour < 1 or hour > 12:
            return None
        hour = hour % 12 + (12 if period.upper() == "PM" else 0)
    elif hour > 23:
        return None
    return hour * 60 + minute


def format_clock(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def normalize_clock(raw: str) -> str:
    """Canonical ``HH:MM`` for a parseable clock string, else the trimmed input."""
    parsed = parse_clock(raw)
    if parsed is None:
        return raw.strip() if isinstance(raw, str) else raw
    return format_clock(parsed)


def range_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def break_overlap(start: int, end: int, window: BreakWindow = DEFAULT_BREAK) -> int:
    """Minutes of ``window`` covered by the shift ``start -> end``.

    A shift whose end is before its start runs past midnight and is split
    into ``[start, midnight)`` and ``[midnight, end)``.
    """
    if start <= end:
        return range_overlap(start, end, window.start, window.end)
    return range_overlap(start, MINUTES_PER_DAY, window.start, window.end) + range_overlap(
        0, end, window.start, window.end
    )


def compute_duration(time_in: str, time_out: str, break_window: BreakWindow = DEFAULT_BREAK) -> float:
    """Hours worked between two clock times, excluding the break window.

    ``time_out`` at or before ``time_in`` is read as an overnight shift, except
    that equal times are zero minutes, never a full day. The result is rounded
    half-up to two decimals.
    """
    start = parse_clock(time_in)
    end = parse_clock(time_out)
    if start is None or end is None:
        return 0.0

    minutes = (end - start + MINUTES_PER_DAY) % MINUTES_PER_DAY
    minutes -= break_overlap(start, end, break_window)
    if minutes < 0:
        minutes = 0

    hours = (Decimal(minutes) / SIXTY).quantize(HOUR_PLACES, rounding=ROUND_HALF_UP)
    return float(hours)
