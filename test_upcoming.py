#!/usr/bin/env python3
"""
Tests for the upcoming important events feed and D-day labels.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from datetime import date

from models.data_models import Category, DateEvent, TimedEvent
from core.upcoming import d_day, d_day_label, upcoming

TODAY = date(2024, 3, 1)

def make_date_event(title, ymd, importance="HIGH", **kw):
    return DateEvent(id=f"de_{title}", date=ymd, title=title, category_id="cat_work",
                     importance=importance, **kw)

def make_timed_event(title, ymd, start_min, importance="HIGH", **kw):
    return TimedEvent(id=f"te_{title}", anchor_date=ymd, start_min=start_min, end_min=start_min + 60,
                      title=title, category_id="cat_work", importance=importance, **kw)

def test_window_boundary_is_inclusive():
    events = [make_date_event("today", "2024-03-01"),
              make_date_event("day30", "2024-03-31"),
              make_date_event("day31", "2024-04-01"),
              make_date_event("yesterday", "2024-02-29")]

    entries = upcoming(events, [], TODAY)

    assert [e.title for e in entries] == ["today", "day30"]

def test_only_high_plus_and_enabled_events():
    date_events = [make_date_event("low", "2024-03-02", "LOW"),
                   make_date_event("middle", "2024-03-02", "MIDDLE"),
                   make_date_event("off", "2024-03-02", "CRITICAL", is_enabled=False),
                   make_date_event("high", "2024-03-02", "HIGH")]
    timed_events = [make_timed_event("t_low", "2024-03-02", 0, "MIDDLE"),
                    make_timed_event("t_crit", "2024-03-02", 0, "CRITICAL")]

    entries = upcoming(date_events, timed_events, TODAY)

    assert [e.title for e in entries] == ["high", "t_crit"]

def test_sort_date_then_all_day_first_then_start_then_importance():
    date_events = [make_date_event("d5_high", "2024-03-05", "HIGH"),
                   make_date_event("d5_crit", "2024-03-05", "CRITICAL"),
                   make_date_event("d3", "2024-03-03", "HIGH")]
    timed_events = [make_timed_event("t5_late", "2024-03-05", 600),
                    make_timed_event("t5_first", "2024-03-05", 0),
                    make_timed_event("t2", "2024-03-02", 1380)]

    entries = upcoming(date_events, timed_events, TODAY)

    assert [e.title for e in entries] == ["t2", "d3", "d5_crit", "d5_high", "t5_first", "t5_late"]
    assert entries[0].kind == "TIMED" and entries[0].start_min == 1380
    assert entries[1].kind == "DATE" and entries[1].start_min is None

def test_limit_and_custom_window():
    events = [make_date_event(f"e{i:02d}", f"2024-03-{i:02d}") for i in range(1, 21)]

    assert len(upcoming(events, [], TODAY)) == 10
    assert [e.title for e in upcoming(events, [], TODAY, window_days=2, limit=5)] == ["e01", "e02", "e03"]

def test_disabled_category_is_skipped_when_categories_given():
    events = [make_date_event("work", "2024-03-02")]
    categories = {"cat_work": Category(id="cat_work", name="Work", is_enabled=False)}

    assert upcoming(events, [], TODAY, categories=categories) == []
    assert len(upcoming(events, [], TODAY)) == 1

def test_malformed_dates_are_skipped():
    events = [make_date_event("broken", "2024-13-45"), make_date_event("ok", "2024-03-02")]
    assert [e.title for e in upcoming(events, [], TODAY)] == ["ok"]

def test_recomputed_each_call():
    events = [make_date_event("a", "2024-03-02")]
    assert upcoming(events, [], TODAY) == upcoming(events, [], TODAY)

def test_d_day_labels():
    assert d_day_label(d_day("2024-03-01", TODAY)) == "D-Day"
    assert d_day_label(d_day("2024-03-04", TODAY)) == "D-3"
    assert d_day_label(d_day("2024-02-27", TODAY)) == "D+3"
    assert d_day("not-a-date", TODAY) is None
    assert d_day_label(None) == ""

if __name__ == "__main__":
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"✅ {name}")
