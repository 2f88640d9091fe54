#!/usr/bin/env python3
"""
Tests for snapshot persistence, defaults and holiday seeding.
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

import json
from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from models.constants import FIXED_HOLIDAYS, HOLIDAY_CATEGORY_ID
from models.data_models import CalendarConfig, CalendarEvent, DateEvent, TimedEvent
from core.data_manager import (
    auto_save_state, load_settings, load_state, save_settings, save_state, state_from_blob, state_to_blob,
)
from core.exceptions import FileOperationError
from core.mutations import add_date_event, add_timed_event, update_status
from core.seed import default_state, ensure_year_holidays, has_holidays_for_year

TODAY = date(2024, 5, 1)

def holidays_in(state, year):
    return [e for e in state.date_events if e.is_system and e.date.startswith(f"{year}-")]

def test_default_state_shape():
    state = default_state(TODAY)
    assert [c.id for c in state.categories][:2] == [HOLIDAY_CATEGORY_ID, "cat_general"]
    assert state.find_category(HOLIDAY_CATEGORY_ID).is_system
    assert len(holidays_in(state, 2024)) == len(FIXED_HOLIDAYS)
    assert all(e.category_id == HOLIDAY_CATEGORY_ID and e.importance.value == "MIDDLE"
               for e in state.date_events)
    assert all(e.id.startswith("hol_") for e in state.date_events)
    assert state.timed_events == []
    assert state.employment_start_date == "2024-05-01"

def test_save_and_load_round_trip(tmp_path):
    state = default_state(TODAY)
    state = add_date_event(state, {"date": "2024-05-03", "title": "Launch", "category_id": "cat_work",
                                   "importance": "CRITICAL", "note": "v2"}).state
    state = add_timed_event(state, {"anchor_date": "2024-05-03", "start_min": 1380, "end_min": 1440,
                                    "title": "Deploy", "category_id": "cat_work", "location": "Ops"}).state
    state = update_status(state, {"company_name": "Acme", "remaining_leave_minutes": 1560}).state
    path = str(tmp_path / "data" / "calendar_state.json")

    save_state(state, path)
    loaded = load_state(path, today=TODAY)

    assert loaded == state
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    assert raw["companyName"] == "Acme"
    assert raw["timedEvents"][0]["anchorDate"] == "2024-05-03"
    assert raw["timedEvents"][0]["kind"] == "TIMED"
    assert "lastUpdated" in raw

def test_missing_file_gives_defaults(tmp_path):
    state = load_state(str(tmp_path / "nope.json"), today=TODAY)
    assert len(state.categories) == 5
    assert len(holidays_in(state, 2024)) == len(FIXED_HOLIDAYS)

@pytest.mark.parametrize("blob", [
    None,
    "not json at all",
    "[]",
    {"categories": "oops", "dateEvents": [], "timedEvents": []},
    {"categories": []},
])
def test_malformed_blob_falls_back_to_defaults(blob):
    state = state_from_blob(blob, today=TODAY)
    assert len(state.categories) == 5
    assert len(holidays_in(state, 2024)) == len(FIXED_HOLIDAYS)

def test_invalid_entities_are_dropped_and_missing_flags_defaulted():
    blob = {
        "categories": [{"id": "cat_work", "name": "Work", "color": "#3b82f6"},
                       {"id": "cat_bad", "name": "Bad", "color": "not-a-color"}],
        "dateEvents": [{"id": "de_1", "date": "2024-05-02", "title": "Kept", "categoryId": "cat_work",
                        "importance": "HIGH"},
                       {"id": "de_2", "title": "No date"}],
        "timedEvents": [{"id": "te_1", "anchorDate": "2024-05-02", "startMin": 600, "endMin": 540,
                         "title": "Backwards", "categoryId": "cat_work"}],
        "companyName": "Acme",
    }

    state = state_from_blob(json.dumps(blob), today=TODAY)

    assert [c.id for c in state.categories] == [HOLIDAY_CATEGORY_ID, "cat_work"]
    work = state.find_category("cat_work")
    assert work.is_enabled and not work.is_system
    kept = state.find_date_event("de_1")
    assert kept.is_enabled and not kept.is_system and kept.created_at == 0
    assert state.find_date_event("de_2") is None
    assert state.timed_events == []
    assert state.company_name == "Acme"

def test_state_file_with_invalid_utf8_gives_defaults(tmp_path):
    path = tmp_path / "calendar_state.json"
    path.write_bytes(b'{"categories": [], "dateEvents": [], "timedEvents": [], "companyName": "\xff\xfe"}')

    state = load_state(str(path), today=TODAY)

    assert state.company_name == "COMPANY"
    assert len(state.categories) == 5
    assert len(holidays_in(state, 2024)) == len(FIXED_HOLIDAYS)

@pytest.mark.parametrize("categories", [
    [],
    [{"id": "cat_work", "name": "Work", "color": "#3b82f6"}],
])
def test_missing_holiday_category_is_restored(categories):
    state = state_from_blob({"categories": categories, "dateEvents": [], "timedEvents": []}, today=TODAY)

    holiday = state.find_category(HOLIDAY_CATEGORY_ID)
    assert holiday is not None and holiday.is_system
    assert state.categories[0].id == HOLIDAY_CATEGORY_ID
    assert len(holidays_in(state, 2024)) == len(FIXED_HOLIDAYS)
    assert all(state.find_category(e.category_id) for e in [*state.date_events, *state.timed_events])

def test_invalid_status_field_only_resets_itself():
    blob = {"categories": [], "dateEvents": [], "timedEvents": [],
            "companyName": "Acme", "employmentStartDate": "2020-01-01",
            "isEmployed": "not sure", "remainingLeaveMinutes": -30}

    state = state_from_blob(blob, today=TODAY)

    assert (state.company_name, state.employment_start_date) == ("Acme", "2020-01-01")
    assert state.remaining_leave_minutes == 0
    assert state.is_employed is True

def test_fractional_leave_is_floored():
    blob = {"categories": [], "dateEvents": [], "timedEvents": [], "remainingLeaveMinutes": 90.7}
    assert state_from_blob(blob, today=TODAY).remaining_leave_minutes == 90

def test_shopping_items_load_with_the_snapshot():
    blob = {"categories": [], "dateEvents": [], "timedEvents": [],
            "shoppingItems": [{"id": "shop_1", "name": "Milk", "priority": "HIGH", "price": 2.5},
                              {"id": "shop_2", "name": "   "}]}

    state = state_from_blob(blob, today=TODAY)

    assert [i.name for i in state.shopping_items] == ["Milk"]
    assert state_from_blob({"categories": [], "dateEvents": [], "timedEvents": [],
                            "shoppingItems": "oops"}, today=TODAY).shopping_items == []

def test_event_kind_picks_the_model():
    adapter = TypeAdapter(CalendarEvent)

    timed = adapter.validate_python({"kind": "TIMED", "id": "te_1", "anchorDate": "2024-05-02", "startMin": 0,
                                     "endMin": 30, "title": "Call", "categoryId": "cat_work"})
    dated = adapter.validate_python({"kind": "DATE", "id": "de_1", "date": "2024-05-02", "title": "Trip",
                                     "categoryId": "cat_work", "isHoliday": True})

    assert isinstance(timed, TimedEvent)
    assert isinstance(dated, DateEvent) and not dated.is_system
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "HOLIDAY", "id": "x", "date": "2024-05-02", "title": "x",
                                 "categoryId": "cat_work"})

def test_holidays_seeded_once_per_year():
    state = default_state(TODAY)
    assert has_holidays_for_year(state, 2024)
    assert not has_holidays_for_year(state, 2025)

    next_year = ensure_year_holidays(state, 2025)
    again = ensure_year_holidays(next_year, 2025)

    assert len(holidays_in(next_year, 2025)) == len(FIXED_HOLIDAYS)
    assert again == next_year
    assert len(holidays_in(state_from_blob(state_to_blob(next_year), today=date(2025, 1, 2)), 2025)) == len(FIXED_HOLIDAYS)

def test_loading_in_a_new_year_adds_that_year(tmp_path):
    path = str(tmp_path / "state.json")
    save_state(default_state(TODAY), path)

    loaded = load_state(path, today=date(2025, 1, 1))

    assert len(holidays_in(loaded, 2024)) == len(FIXED_HOLIDAYS)
    assert len(holidays_in(loaded, 2025)) == len(FIXED_HOLIDAYS)

def test_save_failure_raises_and_auto_save_reports(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")
    path = str(blocker / "state.json")

    with pytest.raises(FileOperationError):
        save_state(default_state(TODAY), path)
    assert auto_save_state(default_state(TODAY), path) is False
    assert auto_save_state(default_state(TODAY), str(tmp_path / "ok.json")) is True

def test_settings_round_trip_and_fallbacks(tmp_path):
    path = str(tmp_path / "settings.json")
    assert load_settings(path) == CalendarConfig()

    save_settings(CalendarConfig(upcoming_limit=5, upcoming_window_days=14), path)
    loaded = load_settings(path)
    assert (loaded.upcoming_limit, loaded.upcoming_window_days) == (5, 14)

    with open(path, "w", encoding="utf-8") as f:
        json.dump({"settings": {"upcoming_limit": 0}}, f)
    assert load_settings(path) == CalendarConfig()

    with open(path, "w", encoding="utf-8") as f:
        json.dump({"settings": [1, 2, 3]}, f)
    assert load_settings(path) == CalendarConfig()

    with open(path, "w", encoding="utf-8") as f:
        f.write("{broken")
    assert load_settings(path) == CalendarConfig()

if __name__ == "__main__":
    import tempfile
    from pathlib import Path
    for name, func in list(globals().items()):
        if not name.startswith("test_") or not callable(func) or hasattr(func, "pytestmark"):
            continue
        if "tmp_path" in func.__code__.co_varnames[:func.__code__.co_argcount]:
            with tempfile.TemporaryDirectory() as d:
                func(Path(d))
        else:
            func()
        print(f"✅ {name}")
