# =============================================================================
# Calendar Grid UI Components for Daybook Calendar
# =============================================================================

import streamlit as st
import pandas as pd
from datetime import date
from typing import List

from models.data_models import AppState, CalendarEvent, TimedEvent
from core.calendar_grid import grid_weeks, move_anchor
from core.day_display import all_events_for_date, day_display
from core.utils import (
    format_month_day, is_today, minutes_to_clock, shift_months, time_range_label, to_local_date,
    weekday_label,
)
from ui.session import get_config, get_state, open_scheduler

def event_line(event: CalendarEvent) -> str:
    """One-line label for a cell entry."""
    mark = "❗" if event.importance.is_high_plus else ""
    if isinstance(event, TimedEvent):
        return f"{minutes_to_clock(event.start_min)} {mark}{event.title}"
    return f"• {mark}{event.title}"

def create_calendar_grid(state: AppState, anchor: str, capacity: int) -> pd.DataFrame:
    """
    Five-week grid as a DataFrame: one row per week, one column per weekday.
    Each cell holds the day label, the allocated entries and a "+N more" marker.
    """
    rows = []
    for week in grid_weeks(anchor):
        row = {}
        for idx, ymd in enumerate(week):
            display = day_display(state, ymd, capacity)
            header = f"[{format_month_day(ymd)}]" if is_today(ymd) else format_month_day(ymd)
            lines = [header, *(event_line(e) for e in display.items)]
            if display.has_overflow:
                lines.append(f"+{display.hidden_count} more")
            row[weekday_label(idx)] = "\n".join(lines)
        rows.append(row)
    return pd.DataFrame(rows, columns=[weekday_label(i) for i in range(7)])

def overflow_days(state: AppState, anchor: str, capacity: int) -> List[str]:
    return [ymd for week in grid_weeks(anchor) for ymd in week
            if day_display(state, ymd, capacity).has_overflow]

def _jump_to():
    jump = st.session_state.nav_jump
    if jump is not None:
        st.session_state.anchor_date = to_local_date(jump)

def render_month_navigation():
    """Week / month navigation for the grid anchor."""
    anchor = st.session_state.anchor_date
    col1, col2, col3, col4, col5, col6 = st.columns([1, 1, 1, 1, 1, 2])
    with col1:
        if st.button("◀◀ Month", key="nav_prev_month"):
            st.session_state.anchor_date = shift_months(anchor, -1) or anchor
            st.rerun()
    with col2:
        if st.button("◀ Week", key="nav_prev_week"):
            st.session_state.anchor_date = move_anchor(anchor, -1)
            st.rerun()
    with col3:
        if st.button("Today", key="nav_today"):
            st.session_state.anchor_date = to_local_date(date.today())
            st.rerun()
    with col4:
        if st.button("Week ▶", key="nav_next_week"):
            st.session_state.anchor_date = move_anchor(anchor, 1)
            st.rerun()
    with col5:
        if st.button("Month ▶▶", key="nav_next_month"):
            st.session_state.anchor_date = shift_months(anchor, 1) or anchor
            st.rerun()
    with col6:
        st.date_input("Jump to", value=None, key="nav_jump", on_change=_jump_to)

def render_all_events(ymd: str):
    """Overflow view: every event of one date."""
    state = get_state()
    categories = state.category_map()
    events = all_events_for_date(state, ymd)
    if not events:
        st.info("No events.")
        return
    for event in events:
        category = categories.get(event.category_id)
        when = time_range_label(event.start_min, event.end_min) if isinstance(event, TimedEvent) else "ALL-DAY"
        st.markdown(
            f"`{when}` **{event.title}** · {event.importance.label}"
            + (f" · {category.name}" if category else "")
        )
        if isinstance(event, TimedEvent) and event.location.strip():
            st.caption(f"📍 {event.location}")
        if event.note.strip():
            st.caption(f"🗒 {event.note}")

def render_calendar_view():
    """Five-week calendar with per-day overflow lists."""
    state = get_state()
    config = get_config()
    anchor = st.session_state.anchor_date
    today = to_local_date(date.today())

    render_month_navigation()

    grid_df = create_calendar_grid(state, anchor, config.day_capacity)
    st.dataframe(grid_df, use_container_width=True, hide_index=True, height=5 * 35 * 4)

    days = [ymd for week in grid_weeks(anchor) for ymd in week]
    col1, col2 = st.columns([3, 1])
    with col1:
        picked = st.selectbox("Day", options=days, index=days.index(today) if today in days else 7,
                              format_func=lambda d: f"{d} ({format_month_day(d)})", key="grid_day_pick")
    with col2:
        if st.button("Open scheduler", key="grid_open_scheduler"):
            open_scheduler(picked)
            st.rerun()

    for ymd in overflow_days(state, anchor, config.day_capacity):
        with st.expander(f"More on {ymd}"):
            render_all_events(ymd)
