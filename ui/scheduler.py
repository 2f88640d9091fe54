# =============================================================================
# Single-Day Scheduler UI Components for Daybook Calendar
# =============================================================================

import streamlit as st
import pandas as pd
from datetime import date
from typing import List

from models.data_models import Category, DateEvent, Importance, TimedEvent, TimelineRow
from core.day_display import events_for_date, sort_date_events, sort_timed_events, timeline_rows
from core.mutations import (
    add_date_event, add_timed_event, add_timed_series, delete_date_event, delete_timed_event,
    update_date_event, update_timed_event,
)
from core.utils import (
    add_days, days_between, end_time_options, format_month_day, parse_local_date, time_options,
    time_range_label, to_local_date, weekday_label,
)
from ui.session import apply_result, get_state

IMPORTANCE_OPTIONS = [i.value for i in Importance]

def enabled_categories(categories: List[Category]) -> List[Category]:
    return [c for c in categories if c.is_enabled] or list(categories)

def create_timeline_frame(rows: List[TimelineRow]) -> pd.DataFrame:
    """Timeline rows (07:00 .. 06:30) as a two-column table."""
    return pd.DataFrame([
        {"Time": row.label, "Events": ", ".join(t.title for t in row.events)}
        for row in rows
    ])

def render_day_navigation() -> str:
    ymd = st.session_state.selected_date
    col1, col2, col3, col4 = st.columns([1, 1, 2, 1])
    with col1:
        if st.button("← Calendar", key="sched_back"):
            st.session_state.view = "CALENDAR"
            st.rerun()
    with col2:
        if st.button("◀ Day", key="sched_prev"):
            st.session_state.selected_date = add_days(ymd, -1) or ymd
            st.rerun()
    with col3:
        offset = days_between(to_local_date(date.today()), ymd)
        relative = "today" if offset == 0 else (f"{offset:+d}d" if offset is not None else "")
        st.markdown(f"### {ymd} ({format_month_day(ymd)}) {relative}")
    with col4:
        if st.button("Day ▶", key="sched_next"):
            st.session_state.selected_date = add_days(ymd, 1) or ymd
            st.rerun()
    return ymd

def render_date_event_row(event: DateEvent):
    hidden = "" if event.is_enabled else " (disabled)"
    with st.expander(f"{event.title} · {event.importance.label}{hidden}"):
        title = st.text_input("Title", value=event.title, key=f"de_title_{event.id}")
        importance = st.selectbox("Importance", IMPORTANCE_OPTIONS,
                                  index=IMPORTANCE_OPTIONS.index(event.importance.value),
                                  key=f"de_imp_{event.id}")
        note = st.text_area("Note", value=event.note, key=f"de_note_{event.id}")
        enabled = st.checkbox("Enabled", value=event.is_enabled, key=f"de_enabled_{event.id}")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Save", key=f"de_save_{event.id}") and title.strip():
                if apply_result(update_date_event(get_state(), event.id, {
                    "title": title.strip(), "importance": importance,
                    "note": note.strip(), "is_enabled": enabled,
                })):
                    st.rerun()
        with col2:
            if st.button("Delete", key=f"de_delete_{event.id}", disabled=event.is_system):
                if apply_result(delete_date_event(get_state(), event.id)):
                    st.rerun()

def render_timed_event_row(event: TimedEvent):
    repeat_mark = " ↻" if event.series_id else ""
    label = f"{time_range_label(event.start_min, event.end_min)} {event.title}{repeat_mark} · {event.importance.label}"
    with st.expander(label):
        title = st.text_input("Title", value=event.title, key=f"te_title_{event.id}")
        starts = list(time_options())
        start = st.selectbox("Start", [v for v, _ in starts], format_func=dict(starts).get,
                             index=[v for v, _ in starts].index(event.start_min), key=f"te_start_{event.id}")
        ends = list(end_time_options(start))
        end_values = [v for v, _ in ends]
        end = st.selectbox("End", end_values, format_func=dict(ends).get,
                           index=end_values.index(event.end_min) if event.end_min in end_values else 0,
                           key=f"te_end_{event.id}")
        importance = st.selectbox("Importance", IMPORTANCE_OPTIONS,
                                  index=IMPORTANCE_OPTIONS.index(event.importance.value),
                                  key=f"te_imp_{event.id}")
        location = st.text_input("Location", value=event.location, key=f"te_loc_{event.id}")
        note = st.text_input("Note", value=event.note, key=f"te_note_{event.id}")
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Save", key=f"te_save_{event.id}") and title.strip():
                if apply_result(update_timed_event(get_state(), event.id, {
                    "title": title.strip(), "start_min": start, "end_min": end,
                    "importance": importance, "location": location.strip(), "note": note.strip(),
                })):
                    st.rerun()
        with col2:
            if st.button("Delete", key=f"te_delete_{event.id}"):
                if apply_result(delete_timed_event(get_state(), event.id)):
                    st.rerun()

def render_add_date_event(ymd: str, categories: List[Category]):
    with st.form("add_date_event", clear_on_submit=True):
        st.markdown("**Add date event**")
        title = st.text_input("Title")
        category = st.selectbox("Category", categories, format_func=lambda c: c.name)
        importance = st.selectbox("Importance", IMPORTANCE_OPTIONS)
        note = st.text_area("Note (optional)")
        if st.form_submit_button("Add") and title.strip():
            if apply_result(add_date_event(get_state(), {
                "date": ymd, "title": title.strip(), "category_id": category.id,
                "importance": importance, "note": note.strip(),
                "is_system": False, "is_enabled": True,
            })):
                st.rerun()

def render_add_timed_event(ymd: str, categories: List[Category]):
    st.markdown("**Add timed event (07:00–06:00)**")
    starts = list(time_options())
    start = st.selectbox("Start", [v for v, _ in starts], format_func=dict(starts).get, key="add_te_start")
    ends = list(end_time_options(start))
    end = st.selectbox("End", [v for v, _ in ends], format_func=dict(ends).get, key="add_te_end")
    with st.form("add_timed_event", clear_on_submit=True):
        title = st.text_input("Title")
        category = st.selectbox("Category", categories, format_func=lambda c: c.name)
        importance = st.selectbox("Importance", IMPORTANCE_OPTIONS)
        location = st.text_input("Location (optional)")
        note = st.text_input("Note (optional)")
        repeat = st.checkbox("Repeat weekly")
        repeat_days = st.multiselect("Repeat on", list(range(7)), format_func=weekday_label)
        repeat_end = st.date_input("Repeat until", value=parse_local_date(ymd))
        skip_conflicts = st.checkbox("Skip dates that overlap existing events")
        if st.form_submit_button("Add") and title.strip():
            data = {
                "anchor_date": ymd, "start_min": start, "end_min": end,
                "title": title.strip(), "category_id": category.id, "importance": importance,
                "location": location.strip(), "note": note.strip(),
            }
            if repeat:
                end_ymd = to_local_date(repeat_end) if repeat_end else ""
                result = add_timed_series(get_state(), data, repeat_days, end_ymd, skip_conflicts=skip_conflicts)
            else:
                result = add_timed_event(get_state(), data)
            if apply_result(result):
                if result.conflicts:
                    st.info(f"Skipped overlapping dates: {', '.join(result.conflicts)}")
                st.rerun()

def render_scheduler_view():
    """Single business day: all-day events, timeline and editors."""
    ymd = render_day_navigation()
    state = get_state()
    categories = enabled_categories(state.categories)
    # Editors list every event of the day, including disabled ones
    date_events = [e for e in state.date_events if e.date == ymd]
    timed_events = [t for t in state.timed_events if t.anchor_date == ymd]
    _, visible_timed = events_for_date(state, ymd)

    st.subheader(f"Date events (all-day) · {len(date_events)}")
    if not date_events:
        st.info("No date events.")
    for event in sort_date_events(date_events):
        render_date_event_row(event)
    if categories:
        render_add_date_event(ymd, categories)
    else:
        st.info("Add a category before adding events.")

    st.subheader(f"Timed events (07:00–06:00) · {len(timed_events)}")
    col1, col2 = st.columns([1, 2])
    with col1:
        st.dataframe(create_timeline_frame(timeline_rows(visible_timed)),
                     hide_index=True, use_container_width=True, height=600)
    with col2:
        if not timed_events:
            st.info("No timed events.")
        for event in sort_timed_events(timed_events):
            render_timed_event_row(event)
        if categories:
            render_add_timed_event(ymd, categories)
