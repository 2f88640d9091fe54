# =============================================================================
# Core Time/Date Utilities for Daybook Calendar
# =============================================================================

from datetime import datetime, date, timedelta
from dateutil.relativedelta import relativedelta
from typing import Iterator, Optional, Tuple, Union
from models.constants import (
    DAY_ORIGIN_MINUTES, MAX_END_MIN, MAX_START_MIN, MINUTES_PER_DAY,
    SLOT_MINUTES, WEEKDAY_NAMES,
)

def to_local_date(value: Union[date, datetime]) -> str:
    """Format a date as a local YYYY-MM-DD string (no timezone)."""
    return value.strftime("%Y-%m-%d")

def parse_local_date(ymd: Optional[str]) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string.
    Returns None for missing or malformed input instead of raising.
    """
    if not ymd or not isinstance(ymd, str):
        return None
    try:
        return datetime.strptime(ymd.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None

def add_days(ymd: str, n: int) -> Optional[str]:
    """Shift a YMD string by n calendar days."""
    d = parse_local_date(ymd)
    if d is None:
        return None
    return to_local_date(d + timedelta(days=n))

def shift_months(ymd: str, n: int) -> Optional[str]:
    """Shift a YMD string by n months, clamping the day to the month end."""
    d = parse_local_date(ymd)
    if d is None:
        return None
    return to_local_date(d + relativedelta(months=n))

def start_of_week_monday(ymd: str) -> Optional[str]:
    """Monday of the week containing ymd (Monday=offset 0, Sunday=offset 6)."""
    d = parse_local_date(ymd)
    if d is None:
        return None
    return to_local_date(d - timedelta(days=d.weekday()))

def is_today(ymd: str, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return ymd == to_local_date(today)

def days_between(start_ymd: str, end_ymd: str) -> Optional[int]:
    """Signed number of days from start to end."""
    start = parse_local_date(start_ymd)
    end = parse_local_date(end_ymd)
    if start is None or end is None:
        return None
    return (end - start).days

def date_range(start: date, end: date):
    """Generate date range from start to end (inclusive)."""
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)

def format_month_day(ymd: str) -> str:
    """MM.DD label for a YMD string; empty for malformed input."""
    d = parse_local_date(ymd)
    return d.strftime("%m.%d") if d else ""

def weekday_label(idx: int) -> str:
    """Monday-first weekday name for index 0..6."""
    return WEEKDAY_NAMES[idx] if 0 <= idx < len(WEEKDAY_NAMES) else ""

def minutes_to_clock(offset_min: int) -> str:
    """
    Convert a minute offset from the 07:00 day origin into a HH:MM clock label.
    1020 wraps to 00:00, 1440 (end of business day) is 06:00 the next morning.
    """
    total = (DAY_ORIGIN_MINUTES + offset_min) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"

def time_range_label(start_min: int, end_min: int) -> str:
    return f"{minutes_to_clock(start_min)}–{minutes_to_clock(end_min)}"

def time_options() -> Iterator[Tuple[int, str]]:
    """Valid 30-minute start offsets 0..1410 paired with their clock labels."""
    for offset in range(0, MAX_START_MIN + 1, SLOT_MINUTES):
        yield offset, minutes_to_clock(offset)

def end_time_options(start_min: int) -> Iterator[Tuple[int, str]]:
    """Valid end offsets after start_min, up to and including 06:00 (1440)."""
    for offset in range(start_min + SLOT_MINUTES, MAX_END_MIN + 1, SLOT_MINUTES):
        yield offset, minutes_to_clock(offset)
