# =============================================================================
# Session State for Daybook Calendar
# =============================================================================

import logging
import os
from datetime import date
import streamlit as st

from models.constants import STATE_FILE
from models.data_models import AppState, CalendarConfig, MutationResult
from core.data_manager import auto_save_state, load_settings, load_state
from core.utils import to_local_date

logger = logging.getLogger(__name__)

def state_path(config: CalendarConfig) -> str:
    return os.path.join(config.data_dir, os.path.basename(STATE_FILE))

def init_session_state():
    """Load settings and the snapshot once per browser session."""
    if "config" not in st.session_state:
        st.session_state.config = load_settings()
    if "calendar_state" not in st.session_state:
        st.session_state.calendar_state = load_state(state_path(st.session_state.config))
    today = to_local_date(date.today())
    st.session_state.setdefault("anchor_date", today)
    st.session_state.setdefault("selected_date", today)
    st.session_state.setdefault("view", "CALENDAR")

def get_state() -> AppState:
    return st.session_state.calendar_state

def get_config() -> CalendarConfig:
    return st.session_state.config

def apply_result(result: MutationResult) -> bool:
    """
    Swap in the snapshot of a successful mutation and auto-save it.
    Refusals are surfaced to the user and leave the snapshot untouched.
    """
    if not result.ok:
        st.warning(result.message or "Change was not applied.")
        return False
    st.session_state.calendar_state = result.state
    if not auto_save_state(result.state, state_path(get_config())):
        logger.warning("Snapshot kept in memory only")
    return True

def open_scheduler(ymd: str):
    st.session_state.selected_date = ymd
    st.session_state.view = "SCHEDULER"
