# =============================================================================
# Five-Week Calendar Grid
# =============================================================================

from typing import List
from models.constants import GRID_LEAD_WEEKS, GRID_WEEKS
from core.utils import add_days, parse_local_date, start_of_week_monday, to_local_date, date_range

def build_grid(anchor_ymd: str) -> List[str]:
    """
    Dates of the five-week grid around an anchor, Monday first.
    The anchor's week is the second row: one week of context before it, three after.
    Returns an empty list for a malformed anchor.
    """
    week_start = start_of_week_monday(anchor_ymd)
    if week_start is None:
        return []
    start = parse_local_date(add_days(week_start, -7 * GRID_LEAD_WEEKS))
    end = parse_local_date(add_days(to_local_date(start), GRID_WEEKS * 7 - 1))
    return [to_local_date(d) for d in date_range(start, end)]

def grid_weeks(anchor_ymd: str) -> List[List[str]]:
    """The grid split into rows of seven days."""
    days = build_grid(anchor_ymd)
    return [days[i:i + 7] for i in range(0, len(days), 7)]

def move_anchor(anchor_ymd: str, weeks: int) -> str:
    """Move the grid anchor by whole weeks; a malformed anchor is returned unchanged."""
    moved = add_days(anchor_ymd, 7 * weeks)
    return moved if moved is not None else anchor_ymd
