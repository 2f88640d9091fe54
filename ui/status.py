# =============================================================================
# Status, Upcoming and Category Panels for Daybook Calendar
# =============================================================================

import streamlit as st
from datetime import date

from core.data_manager import save_settings
from core.employment import employment_summary, format_leave, leave_from_parts, parse_leave
from core.exceptions import FileOperationError
from core.mutations import add_category, delete_category, update_category, update_status
from core.upcoming import d_day, d_day_label, upcoming
from core.utils import minutes_to_clock, parse_local_date
from ui.session import apply_result, get_config, get_state, open_scheduler

def render_status_panel():
    """Company, employment duration and remaining leave, with an editor."""
    state = get_state()
    today = date.today()
    summary = employment_summary(state.employment_start_date, state.employment_end_date,
                                 state.is_employed, today)
    leave = format_leave(state.remaining_leave_minutes)

    st.markdown(f"### {state.company_name}")
    col1, col2, col3 = st.columns(3)
    col1.metric("Status", "Employed" if summary["is_employed"] else "Left")
    col2.metric("Days", f"{summary['days']} days", help=summary["tenure"])
    col3.metric("Leave", leave.label)

    with st.expander("Edit status"):
        company = st.text_input("Company", value=state.company_name, key="status_company")
        employed = st.checkbox("Currently employed", value=state.is_employed, key="status_employed")
        start = st.date_input("Start date", value=parse_local_date(state.employment_start_date),
                              key="status_start")
        end = st.date_input("End date", value=parse_local_date(state.employment_end_date),
                            disabled=employed, key="status_end")
        col1, col2 = st.columns(2)
        days = col1.number_input("Leave days", min_value=0, value=leave.d, key="status_leave_d")
        hours = col2.number_input("Leave hours", min_value=0, max_value=7, value=leave.h, key="status_leave_h")
        typed = st.text_input("Or type leave", placeholder="3d 2h", key="status_leave_text")
        if st.button("Save status", key="status_save"):
            if apply_result(update_status(state, {
                "company_name": company,
                "is_employed": employed,
                "employment_start_date": start.isoformat() if start else "",
                "employment_end_date": end.isoformat() if end and not employed else "",
                "remaining_leave_minutes": parse_leave(typed) if typed.strip() else leave_from_parts(days, hours),
            })):
                st.rerun()

def render_upcoming_panel():
    """High/Critical events in the configured window."""
    state = get_state()
    config = get_config()
    today = date.today()
    categories = state.category_map()
    entries = upcoming(state.date_events, state.timed_events, today,
                       window_days=config.upcoming_window_days, limit=config.upcoming_limit,
                       categories=categories)

    st.markdown(f"**Upcoming ({config.upcoming_window_days}D) · High+** {len(entries)}/{config.upcoming_limit}")
    if not entries:
        st.info(f"No High/Critical events in the next {config.upcoming_window_days} days.")
        return
    for idx, entry in enumerate(entries):
        category = categories.get(entry.category_id)
        time_label = minutes_to_clock(entry.start_min) if entry.start_min is not None else ""
        label = f"{d_day_label(d_day(entry.date, today))} · {entry.date} {time_label} {entry.title}"
        if category:
            label += f" ({category.name})"
        if st.button(label, key=f"upcoming_{idx}_{entry.event_id}"):
            open_scheduler(entry.date)
            st.rerun()

def render_category_panel():
    """Category list with toggle, rename, recolor, delete and add."""
    state = get_state()
    st.markdown("**Categories**")
    for category in state.categories:
        col1, col2, col3, col4 = st.columns([1, 3, 1, 1])
        with col1:
            enabled = st.checkbox("On", value=category.is_enabled, key=f"cat_on_{category.id}",
                                  label_visibility="collapsed")
            if enabled != category.is_enabled:
                if apply_result(update_category(get_state(), category.id, {"is_enabled": enabled})):
                    st.rerun()
        with col2:
            name = st.text_input("Name", value=category.name, key=f"cat_name_{category.id}",
                                 label_visibility="collapsed")
        with col3:
            color = st.color_picker("Color", value=category.color, key=f"cat_color_{category.id}",
                                    label_visibility="collapsed")
            if (name.strip() and name.strip() != category.name) or color.lower() != category.color:
                if apply_result(update_category(get_state(), category.id,
                                                 {"name": name.strip() or category.name, "color": color})):
                    st.rerun()
        with col4:
            if st.button("🗑", key=f"cat_delete_{category.id}", disabled=category.is_system):
                if apply_result(delete_category(get_state(), category.id)):
                    st.rerun()

    with st.form("add_category", clear_on_submit=True):
        col1, col2 = st.columns([3, 1])
        name = col1.text_input("New category")
        color = col2.color_picker("Color", value="#9aa0a6")
        if st.form_submit_button("Add category") and name.strip():
            if apply_result(add_category(get_state(), name, color)):
                st.rerun()

def render_settings_panel():
    """Display settings, persisted to settings.json."""
    config = get_config()
    with st.expander("Settings"):
        with st.form("calendar_settings"):
            capacity = st.number_input("Items per day cell", min_value=1, max_value=20,
                                       value=config.day_capacity)
            window = st.number_input("Upcoming window (days)", min_value=0, max_value=366,
                                     value=config.upcoming_window_days)
            limit = st.number_input("Upcoming limit", min_value=1, max_value=100,
                                    value=config.upcoming_limit)
            if st.form_submit_button("Save settings"):
                updated = config.model_copy(update={
                    "day_capacity": int(capacity),
                    "upcoming_window_days": int(window),
                    "upcoming_limit": int(limit),
                })
                try:
                    save_settings(updated)
                except FileOperationError as e:
                    st.error(str(e))
                st.session_state.config = updated
                st.rerun()
