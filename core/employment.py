# =============================================================================
# Employment Status and Leave Balance
# =============================================================================

import math
import re
from datetime import date
from dateutil.relativedelta import relativedelta
from typing import Optional
from models.constants import LEAVE_HOURS_PER_DAY
from models.data_models import LeaveBalance
from core.utils import parse_local_date, to_local_date

_BARE_NUMBER = re.compile(r"^\d+(\.\d+)?$")
_DAYS_TOKEN = re.compile(r"(\d+(?:\.\d+)?)\s*d")
_HOURS_TOKEN = re.compile(r"(\d+(?:\.\d+)?)\s*h")

MINUTES_PER_LEAVE_DAY = LEAVE_HOURS_PER_DAY * 60

def parse_leave(text: Optional[str]) -> int:
    """
    Parse free-text leave such as "3d", "1.5h", "3d 2h" or a bare number (hours)
    into minutes. One leave day is 8 hours. Unparseable text counts as zero.
    """
    s = (text or "").strip().lower()
    if not s:
        return 0

    if _BARE_NUMBER.match(s):
        return max(0, math.floor(float(s) * 60))

    days = 0.0
    hours = 0.0
    d_match = _DAYS_TOKEN.search(s)
    h_match = _HOURS_TOKEN.search(s)
    if d_match:
        days = float(d_match.group(1))
    if h_match:
        hours = float(h_match.group(1))

    return max(0, math.floor(days * MINUTES_PER_LEAVE_DAY + hours * 60))

def leave_from_parts(days: float, hours: float) -> int:
    """Minutes for a (days, hours) pair as entered in the status editor."""
    return max(0, math.floor((days or 0) * MINUTES_PER_LEAVE_DAY + (hours or 0) * 60))

def format_leave(minutes: int) -> LeaveBalance:
    """Canonical "<D>D <H>H" rendering; partial hours are dropped."""
    m = max(0, math.floor(minutes))
    total_hours = m // 60
    d = total_hours // LEAVE_HOURS_PER_DAY
    h = total_hours % LEAVE_HOURS_PER_DAY
    return LeaveBalance(d=d, h=h, label=f"{d}D {h}H")

def _employment_end(end_ymd: str, is_employed: bool, today: date) -> Optional[date]:
    if is_employed or not (end_ymd or "").strip():
        return today
    return parse_local_date(end_ymd)

def employment_days(start_ymd: str, end_ymd: str, is_employed: bool, today: date) -> int:
    """
    Days worked, counting both the first day and the last one.
    Runs to today while employed, otherwise to the end date (today if none is set).
    """
    start = parse_local_date(start_ymd)
    end = _employment_end(end_ymd, is_employed, today)
    if start is None or end is None or end < start:
        return 0
    return (end - start).days + 1

def employment_tenure(start_ymd: str, end_ymd: str, is_employed: bool, today: date) -> str:
    """Tenure as "1y 3m 12d"; empty when the dates do not form a valid span."""
    start = parse_local_date(start_ymd)
    end = _employment_end(end_ymd, is_employed, today)
    if start is None or end is None or end < start:
        return ""
    delta = relativedelta(end, start)
    return f"{delta.years}y {delta.months}m {delta.days}d"

def employment_summary(start_ymd: str, end_ymd: str, is_employed: bool, today: date) -> dict:
    """Status bar fields in one dict."""
    end = _employment_end(end_ymd, is_employed, today)
    return {
        "is_employed": is_employed,
        "start_date": start_ymd,
        "end_date": "" if is_employed else (end_ymd or ""),
        "through": to_local_date(end) if end else "",
        "days": employment_days(start_ymd, end_ymd, is_employed, today),
        "tenure": employment_tenure(start_ymd, end_ymd, is_employed, today),
    }
