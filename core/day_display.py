# =============================================================================
# Day-Display Allocation for Daybook Calendar
# =============================================================================

import logging
from typing import List, Sequence, Tuple
from models.constants import DAY_CAPACITY, MAX_START_MIN, SLOT_MINUTES
from models.data_models import (
    AppState, CalendarEvent, DateEvent, DayDisplay, Importance, TimedEvent, TimelineRow,
)
from core.utils import minutes_to_clock

logger = logging.getLogger(__name__)

# Date events below HIGH may be pushed to the overflow view
EVICTABLE_IMPORTANCE = (Importance.LOW, Importance.MIDDLE)

def sort_date_events(date_events: Sequence[DateEvent]) -> List[DateEvent]:
    """Importance descending, then earlier created first. Stable for equal keys."""
    return sorted(date_events, key=lambda e: (-e.importance.rank, e.created_at))

def sort_timed_events(timed_events: Sequence[TimedEvent]) -> List[TimedEvent]:
    return sorted(timed_events, key=lambda t: t.start_min)

def allocate(date_events: Sequence[DateEvent], timed_events: Sequence[TimedEvent],
             capacity: int = DAY_CAPACITY) -> DayDisplay:
    """
    Choose what a single calendar cell shows under a fixed item capacity.

    Inputs are the candidate events of one date (already filtered to enabled ones).
    High+ timed events are always shown, even past capacity. Date events fill
    the cell next; when the cell is over capacity, LOW then MIDDLE date events are
    evicted from the tail of the importance order, HIGH/CRITICAL never. Any
    capacity left is filled with the remaining timed events in start order.
    """
    dates_sorted = sort_date_events(date_events)
    mandatory = sort_timed_events([t for t in timed_events if t.importance.is_high_plus])
    optional = sort_timed_events([t for t in timed_events if not t.importance.is_high_plus])

    # Eviction queue: tail of the sorted list first, evictable members only
    eviction_queue = [i for i in reversed(range(len(dates_sorted)))
                      if dates_sorted[i].importance in EVICTABLE_IMPORTANCE]

    excess = len(dates_sorted) + len(mandatory) - capacity
    evicted = set(eviction_queue[:max(0, excess)])
    shown_dates = [e for i, e in enumerate(dates_sorted) if i not in evicted]

    remaining = max(0, capacity - (len(shown_dates) + len(mandatory)))
    shown_timed = sort_timed_events([*mandatory, *optional[:remaining]])

    total = len(dates_sorted) + len(mandatory) + len(optional)
    display = DayDisplay(
        shown_date_events=shown_dates,
        shown_timed_events=shown_timed,
        has_overflow=total > len(shown_dates) + len(shown_timed),
        total_relevant=total,
    )
    if display.has_overflow:
        logger.debug(f"Day cell overflow: showing {display.displayed_count} of {total} "
                     f"({len(mandatory)} mandatory timed, {len(evicted)} date events evicted)")
    return display

def events_for_date(state: AppState, ymd: str) -> Tuple[List[DateEvent], List[TimedEvent]]:
    """
    Candidate events for one calendar cell.
    Disabled date events and events in disabled categories are left out.
    Timed events belong to their anchor date's cell even when they run past midnight.
    """
    disabled = {c.id for c in state.categories if not c.is_enabled}
    date_events = [e for e in state.date_events
                   if e.date == ymd and e.is_enabled and e.category_id not in disabled]
    timed_events = [t for t in state.timed_events
                    if t.anchor_date == ymd and t.category_id not in disabled]
    return date_events, timed_events

def day_display(state: AppState, ymd: str, capacity: int = DAY_CAPACITY) -> DayDisplay:
    date_events, timed_events = events_for_date(state, ymd)
    return allocate(date_events, timed_events, capacity)

def all_events_for_date(state: AppState, ymd: str) -> List[CalendarEvent]:
    """Overflow view: every candidate event of the date, date events then timed."""
    date_events, timed_events = events_for_date(state, ymd)
    return [*sort_date_events(date_events), *sort_timed_events(timed_events)]

def timeline_rows(timed_events: Sequence[TimedEvent]) -> List[TimelineRow]:
    """Single-day timeline: one row per 30-minute slot with the events covering it."""
    ordered = sort_timed_events(timed_events)
    rows = []
    for offset in range(0, MAX_START_MIN + 1, SLOT_MINUTES):
        covering = [t for t in ordered if t.start_min <= offset < t.end_min]
        rows.append(TimelineRow(offset=offset, label=minutes_to_clock(offset), events=covering))
    return rows

def overlapping_timed_events(timed_events: Sequence[TimedEvent], anchor_date: str,
                             start_min: int, end_min: int) -> List[TimedEvent]:
    """Timed events on the same business day whose [start, end) range intersects the given one."""
    return [t for t in timed_events
            if t.anchor_date == anchor_date and start_min < t.end_min and end_min > t.start_min]
