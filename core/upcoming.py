# =============================================================================
# Upcoming Important Events Feed
# =============================================================================

import logging
import math
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence
from models.constants import UPCOMING_LIMIT, UPCOMING_WINDOW_DAYS
from models.data_models import Category, DateEvent, TimedEvent, UpcomingEntry
from core.utils import parse_local_date

logger = logging.getLogger(__name__)

def upcoming(date_events: Sequence[DateEvent], timed_events: Sequence[TimedEvent],
             today: date, window_days: int = UPCOMING_WINDOW_DAYS,
             limit: int = UPCOMING_LIMIT,
             categories: Optional[Dict[str, Category]] = None) -> List[UpcomingEntry]:
    """
    High/Critical events dated within [today, today + window_days], soonest first.
    On the same date, all-day entries come before timed ones, timed ones in start
    order, and importance breaks any remaining tie (higher first).
    """
    end = today + timedelta(days=window_days)

    def in_window(ymd: str) -> bool:
        d = parse_local_date(ymd)
        return d is not None and today <= d <= end

    def category_enabled(category_id: str) -> bool:
        if categories is None or category_id not in categories:
            return True
        return categories[category_id].is_enabled

    entries = []
    for e in date_events:
        if not e.is_enabled or not e.importance.is_high_plus:
            continue
        if not in_window(e.date) or not category_enabled(e.category_id):
            continue
        entries.append(UpcomingEntry(
            kind="DATE", event_id=e.id, date=e.date, title=e.title,
            importance=e.importance, category_id=e.category_id,
        ))

    for t in timed_events:
        if not t.importance.is_high_plus:
            continue
        if not in_window(t.anchor_date) or not category_enabled(t.category_id):
            continue
        entries.append(UpcomingEntry(
            kind="TIMED", event_id=t.id, date=t.anchor_date, start_min=t.start_min,
            title=t.title, importance=t.importance, category_id=t.category_id,
        ))

    entries.sort(key=lambda u: (parse_local_date(u.date), u.time_rank, -u.importance.rank))
    return entries[:limit]

def d_day(event_ymd: str, today: date) -> Optional[int]:
    """Whole days from today to the event date, rounded up."""
    d = parse_local_date(event_ymd)
    if d is None:
        return None
    return math.ceil((d - today) / timedelta(days=1))

def d_day_label(days: Optional[int]) -> str:
    """0 -> D-Day, 3 -> D-3, -2 -> D+2 (event already past)."""
    if days is None:
        return ""
    if days == 0:
        return "D-Day"
    if days > 0:
        return f"D-{days}"
    return f"D+{abs(days)}"
