# =============================================================================
# Daybook Calendar - Main Application
# =============================================================================
import logging
import streamlit as st

from ui.session import init_session_state
from ui.calendar import render_calendar_view
from ui.scheduler import render_scheduler_view
from ui.shopping import render_shopping_panel
from ui.status import (
    render_category_panel, render_settings_panel, render_status_panel, render_upcoming_panel,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

st.set_page_config(
    page_title="Daybook Calendar",
    page_icon="📅",
    layout="wide",
    initial_sidebar_state="expanded"
)

def main():
    init_session_state()

    with st.sidebar:
        render_status_panel()
        st.divider()
        render_upcoming_panel()
        st.divider()
        render_category_panel()
        st.divider()
        render_shopping_panel()
        st.divider()
        render_settings_panel()

    if st.session_state.view == "SCHEDULER":
        render_scheduler_view()
    else:
        st.title("📅 Calendar")
        render_calendar_view()

if __name__ == "__main__":
    main()
