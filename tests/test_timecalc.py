"""Break-aware duration arithmetic."""

import pytest

from ojtlog.services.timecalc import (
    DEFAULT_BREAK,
    BreakWindow,
    break_overlap,
    compute_duration,
    format_clock,
    normalize_clock,
    parse_clock,
)


@pytest.mark.parametrize(
    ("time_in", "time_out", "expected"),
    [
        ("08:00", "17:00", 8),
        ("00:00", "01:00", 1),
        ("12:00", "13:00", 0),
        ("11:30", "13:30", 1),
        ("23:00", "01:00", 2),
        ("12:00 AM", "1:00 PM", 12),
        ("invalid", "13:00", 0),
    ],
)
def test_reference_durations(time_in, time_out, expected):
    assert compute_duration(time_in, time_out) == expected


@pytest.mark.parametrize("clock", ["00:00", "08:15", "12:30", "23:59"])
def test_equal_times_are_zero_not_a_full_day(clock):
    assert compute_duration(clock, clock) == 0


def test_empty_inputs_are_zero():
    assert compute_duration("", "17:00") == 0
    assert compute_duration("08:00", "") == 0
    assert compute_duration(None, None) == 0  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["24:00", "7:60", "13:00 PM", "0:30 am", "8", "08:5", "abc", "08:00:00"])
def test_out_of_range_or_malformed_clock_is_rejected(raw):
    assert parse_clock(raw) is None
    assert compute_duration(raw, "17:00") == 0


def test_parse_clock_accepts_both_forms():
    assert parse_clock("7:05") == 425
    assert parse_clock(" 07:05 ") == 425
    assert parse_clock("7:05 am") == 425
    assert parse_clock("7:05PM") == 19 * 60 + 5
    assert parse_clock("12:00 PM") == 720
    assert parse_clock("12:15 am") == 15


def test_overnight_shift_crossing_the_break_from_the_other_side():
    # 13:00 -> 12:30 next day: 23.5h raw, 30 minutes of the break overlap
    assert compute_duration("13:00", "12:30") == 23


def test_rounding_is_half_up_to_two_places():
    # 10 minutes = 0.1666.. hours
    assert compute_duration("08:00", "08:10") == 0.17
    # 1 minute = 0.01666.. hours
    assert compute_duration("08:00", "08:01") == 0.02


def test_break_overlap_splits_overnight_ranges():
    assert break_overlap(1380, 60) == 0
    assert break_overlap(600, 750) == 30
    assert break_overlap(780, 730) == 10


def test_custom_break_window():
    lunch = BreakWindow.from_clock("11:30", "12:00")
    assert compute_duration("08:00", "17:00", lunch) == 8.5
    assert BreakWindow.from_clock("12:00", "13:00") == DEFAULT_BREAK
    with pytest.raises(ValueError):
        BreakWindow.from_clock("13:00", "12:00")


def test_normalize_clock_produces_canonical_form():
    assert normalize_clock("8:00 AM") == "08:00"
    assert normalize_clock("5:30 pm") == "17:30"
    assert normalize_clock(" nonsense ") == "nonsense"
    assert format_clock(1439) == "23:59"
