# =============================================================================
# Seed Defaults for Daybook Calendar
# =============================================================================

import logging
import time
import uuid
from datetime import date
from typing import List
from models.constants import (
    DEFAULT_CATEGORIES, DEFAULT_COMPANY_NAME, FIXED_HOLIDAYS, HOLIDAY_CATEGORY_ID,
)
from models.data_models import AppState, Category, DateEvent, Importance
from core.utils import to_local_date

logger = logging.getLogger(__name__)

def default_categories() -> List[Category]:
    return [Category(**c) for c in DEFAULT_CATEGORIES]

def seed_fixed_holidays(year: int) -> List[DateEvent]:
    """System date events for the fixed-date national holidays of one year."""
    created_at = int(time.time() * 1000)
    return [
        DateEvent(
            id=f"hol_{uuid.uuid4().hex}",
            date=f"{year}-{month:02d}-{day:02d}",
            title=title,
            category_id=HOLIDAY_CATEGORY_ID,
            importance=Importance.MIDDLE,
            is_system=True,
            is_enabled=True,
            created_at=created_at,
        )
        for month, day, title in FIXED_HOLIDAYS
    ]

def ensure_system_categories(state: AppState) -> AppState:
    """Put back any seeded system category (Holiday) the snapshot lacks, ahead of the others."""
    present = {c.id for c in state.categories}
    missing = [c for c in default_categories() if c.is_system and c.id not in present]
    if not missing:
        return state
    logger.warning(f"Restoring missing system categories: {', '.join(c.id for c in missing)}")
    return state.model_copy(update={"categories": [*missing, *state.categories]})

def has_holidays_for_year(state: AppState, year: int) -> bool:
    prefix = f"{year}-"
    return any(e.is_system and e.date.startswith(prefix) for e in state.date_events)

def ensure_year_holidays(state: AppState, year: int) -> AppState:
    """
    Append the year's holidays the first time that year is seen.
    A year counts as seeded once it has any system date event.
    """
    if has_holidays_for_year(state, year):
        return state
    logger.info(f"Seeding fixed holidays for {year}")
    return state.model_copy(update={"date_events": [*state.date_events, *seed_fixed_holidays(year)]})

def default_state(today: date) -> AppState:
    """Fresh snapshot used on first run or when the stored blob is unusable."""
    return AppState(
        categories=default_categories(),
        date_events=seed_fixed_holidays(today.year),
        timed_events=[],
        company_name=DEFAULT_COMPANY_NAME,
        is_employed=True,
        employment_start_date=to_local_date(today),
        employment_end_date="",
        remaining_leave_minutes=0,
    )
