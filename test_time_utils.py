#!/usr/bin/env python3
"""
Tests for date and 07:00-anchored clock utilities, and the five-week grid.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from datetime import date, datetime

from core.calendar_grid import build_grid, grid_weeks, move_anchor
from core.utils import (
    add_days, days_between, end_time_options, format_month_day, is_today,
    minutes_to_clock, parse_local_date, shift_months, start_of_week_monday,
    time_options, time_range_label, to_local_date, weekday_label,
)

def test_minutes_to_clock_wraps_from_seven_am():
    assert minutes_to_clock(0) == "07:00"
    assert minutes_to_clock(30) == "07:30"
    assert minutes_to_clock(1020) == "00:00"
    assert minutes_to_clock(1380) == "06:00"
    assert minutes_to_clock(1410) == "06:30"
    assert minutes_to_clock(1440) == "07:00"
    assert time_range_label(0, 90) == "07:00–08:30"

def test_time_options_are_restartable():
    first = list(time_options())
    second = list(time_options())
    assert first == second
    assert len(first) == 48
    assert first[0] == (0, "07:00")
    assert first[-1] == (1410, "06:30")

def test_end_time_options_reach_six_am():
    ends = list(end_time_options(1380))
    assert ends == [(1410, "06:30"), (1440, "07:00")]
    assert list(end_time_options(0))[0] == (30, "07:30")

def test_local_date_round_trip():
    assert to_local_date(date(2024, 1, 5)) == "2024-01-05"
    assert to_local_date(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"
    assert parse_local_date("2024-01-05") == date(2024, 1, 5)

def test_malformed_dates_give_none():
    assert parse_local_date("") is None
    assert parse_local_date(None) is None
    assert parse_local_date("2024-02-30") is None
    assert parse_local_date("garbage") is None
    assert add_days("garbage", 1) is None
    assert start_of_week_monday("2024-99-01") is None
    assert days_between("x", "2024-01-01") is None
    assert format_month_day("x") == ""

def test_day_arithmetic():
    assert add_days("2024-02-28", 1) == "2024-02-29"
    assert add_days("2024-03-01", -1) == "2024-02-29"
    assert add_days("2023-12-31", 1) == "2024-01-01"
    assert days_between("2024-01-01", "2024-03-01") == 60
    assert shift_months("2024-01-31", 1) == "2024-02-29"

def test_start_of_week_monday():
    assert start_of_week_monday("2024-01-10") == "2024-01-08"   # Wednesday
    assert start_of_week_monday("2024-01-08") == "2024-01-08"   # Monday
    assert start_of_week_monday("2024-01-14") == "2024-01-08"   # Sunday

def test_labels_and_today():
    assert format_month_day("2024-01-10") == "01.10"
    assert weekday_label(0) == "Mon"
    assert weekday_label(6) == "Sun"
    assert weekday_label(7) == ""
    assert is_today("2024-01-10", today=date(2024, 1, 10))
    assert not is_today("2024-01-11", today=date(2024, 1, 10))

def test_grid_anchoring():
    grid = build_grid("2024-01-10")
    assert len(grid) == 35
    assert grid[0] == "2024-01-01"
    assert grid[7] == start_of_week_monday("2024-01-10")
    assert grid[-1] == "2024-02-04"
    assert all(parse_local_date(d).weekday() == 0 for d in grid[::7])

def test_grid_weeks_and_navigation():
    weeks = grid_weeks("2024-01-10")
    assert len(weeks) == 5
    assert all(len(w) == 7 for w in weeks)
    assert "2024-01-10" in weeks[1]
    assert move_anchor("2024-01-10", 1) == "2024-01-17"
    assert move_anchor("2024-01-10", -2) == "2023-12-27"
    assert move_anchor("bad", 1) == "bad"
    assert build_grid("bad") == []

if __name__ == "__main__":
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"✅ {name}")
