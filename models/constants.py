# =============================================================================
# Constants and Configuration for Daybook Calendar
# =============================================================================

import os

# Day cell capacity (total items shown directly in a calendar cell)
DAY_CAPACITY = 5

# Business day runs 07:00 -> 06:00 next calendar day
DAY_ORIGIN_MINUTES = 7 * 60
MINUTES_PER_DAY = 24 * 60
SLOT_MINUTES = 30
MAX_START_MIN = MINUTES_PER_DAY - SLOT_MINUTES   # 1410 = 06:30
MAX_END_MIN = MINUTES_PER_DAY                    # 1440 = 06:00 next day

# Leave accounting (1 working day = 8 hours)
LEAVE_HOURS_PER_DAY = 8

# Upcoming feed defaults
UPCOMING_WINDOW_DAYS = 30
UPCOMING_LIMIT = 10

# Calendar grid: five weeks, one week of context before the anchor's week
GRID_WEEKS = 5
GRID_LEAD_WEEKS = 1

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Importance ranking
IMPORTANCE_ORDER = {"LOW": 1, "MIDDLE": 2, "HIGH": 3, "CRITICAL": 4}

# Shopping list order (HIGH first)
SHOPPING_PRIORITY_ORDER = {"HIGH": 0, "MIDDLE": 1, "LOW": 2}

# Seed categories
HOLIDAY_CATEGORY_ID = "cat_holiday"
DEFAULT_CATEGORY_ID = "cat_general"

DEFAULT_CATEGORIES = [
    {"id": HOLIDAY_CATEGORY_ID, "name": "Holiday", "color": "#ff4d4f", "is_system": True},
    {"id": DEFAULT_CATEGORY_ID, "name": "General", "color": "#9aa0a6"},
    {"id": "cat_work",          "name": "Work",    "color": "#3b82f6"},
    {"id": "cat_meet",          "name": "Meeting", "color": "#a855f7"},
    {"id": "cat_run",           "name": "Running", "color": "#22c55e"},
]

# Fixed-date national holidays (month, day, title). Not lunar, not substitute-aware.
FIXED_HOLIDAYS = [
    (1, 1, "New Year's Day"),
    (3, 1, "Independence Movement Day"),
    (5, 5, "Children's Day"),
    (6, 6, "Memorial Day"),
    (8, 15, "Liberation Day"),
    (10, 3, "National Foundation Day"),
    (10, 9, "Hangul Day"),
    (12, 25, "Christmas"),
]

# Status bar defaults
DEFAULT_COMPANY_NAME = "COMPANY"

# Data file paths
DATA_DIR = "data"
STATE_FILE = os.path.join(DATA_DIR, "calendar_state.json")
SETTINGS_FILE = os.path.join(DATA_DIR, "settings.json")
