# =============================================================================
# Data Models for Daybook Calendar
# =============================================================================

import math
import re
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.constants import (
    DATA_DIR, DAY_CAPACITY, DEFAULT_COMPANY_NAME, IMPORTANCE_ORDER,
    MAX_END_MIN, MAX_START_MIN, SHOPPING_PRIORITY_ORDER, SLOT_MINUTES,
    UPCOMING_LIMIT, UPCOMING_WINDOW_DAYS,
)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class Importance(str, Enum):
    """Ordinal event priority: LOW < MIDDLE < HIGH < CRITICAL."""
    LOW = "LOW"
    MIDDLE = "MIDDLE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return IMPORTANCE_ORDER[self.value]

    @property
    def is_high_plus(self) -> bool:
        return self in (Importance.HIGH, Importance.CRITICAL)

    @property
    def label(self) -> str:
        return self.value.capitalize()


class RefusalReason(str, Enum):
    """Why the mutation layer refused an operation."""
    CATEGORY_IN_USE = "category_in_use"
    SYSTEM_PROTECTED = "system_protected"
    NOT_FOUND = "not_found"
    CATEGORY_NOT_FOUND = "category_not_found"
    INVALID_INPUT = "invalid_input"
    TIME_OVERLAP = "time_overlap"


class CalendarModel(BaseModel):
    """Snapshot entities serialize with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Category(CalendarModel):
    """User-defined (or seeded system) event category."""
    id: str
    name: str
    color: str = "#9aa0a6"
    is_system: bool = False
    is_enabled: bool = True

    @field_validator("color")
    @classmethod
    def normalize_color(cls, v: str) -> str:
        v = v.strip()
        if not _HEX_COLOR.match(v):
            raise ValueError(f"color must be a hex string like #3b82f6, got {v!r}")
        return v.lower()


class DateEvent(CalendarModel):
    """Untimed event on one local calendar date."""
    kind: Literal["DATE"] = "DATE"
    id: str
    date: str
    title: str
    category_id: str
    importance: Importance = Importance.LOW
    note: str = ""
    is_system: bool = False
    is_enabled: bool = True
    created_at: int = 0


class TimedEvent(CalendarModel):
    """
    Time-ranged event anchored to a business day (07:00 -> 06:00 next day).
    start_min / end_min are offsets from the anchor's 07:00 on the 30-minute grid.
    """
    kind: Literal["TIMED"] = "TIMED"
    id: str
    anchor_date: str
    start_min: int = Field(..., ge=0, le=MAX_START_MIN)
    end_min: int = Field(..., ge=SLOT_MINUTES, le=MAX_END_MIN)
    title: str
    category_id: str
    importance: Importance = Importance.LOW
    location: str = ""
    note: str = ""
    created_at: int = 0
    # Shared by the events of one weekly repeat
    series_id: Optional[str] = None

    @field_validator("start_min", "end_min")
    @classmethod
    def on_slot_grid(cls, v: int) -> int:
        if v % SLOT_MINUTES:
            raise ValueError(f"offset must be a multiple of {SLOT_MINUTES} minutes, got {v}")
        return v

    @model_validator(mode="after")
    def check_range(self) -> "TimedEvent":
        if self.end_min <= self.start_min:
            raise ValueError(f"end_min ({self.end_min}) must be after start_min ({self.start_min})")
        return self


CalendarEvent = Annotated[Union[DateEvent, TimedEvent], Field(discriminator="kind")]


class ShoppingPriority(str, Enum):
    HIGH = "HIGH"
    MIDDLE = "MIDDLE"
    LOW = "LOW"

    @property
    def order(self) -> int:
        """Sort position: HIGH first."""
        return SHOPPING_PRIORITY_ORDER[self.value]


class ShoppingItem(CalendarModel):
    """Entry of the shopping list kept next to the calendar."""
    id: str
    name: str
    priority: ShoppingPriority = ShoppingPriority.MIDDLE
    price: Optional[float] = None
    memo: str = ""
    created_at: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("price")
    @classmethod
    def finite_price(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not math.isfinite(v):
            return None
        return v


class AppState(CalendarModel):
    """The whole application snapshot, loaded and saved as one blob."""
    categories: List[Category] = Field(default_factory=list)
    date_events: List[DateEvent] = Field(default_factory=list)
    timed_events: List[TimedEvent] = Field(default_factory=list)
    shopping_items: List[ShoppingItem] = Field(default_factory=list)

    # Status bar
    company_name: str = DEFAULT_COMPANY_NAME
    is_employed: bool = True
    employment_start_date: str = ""
    employment_end_date: str = ""

    # Leave balance is kept in minutes
    remaining_leave_minutes: int = Field(0, ge=0)

    def category_map(self) -> Dict[str, Category]:
        return {c.id: c for c in self.categories}

    def find_category(self, category_id: str) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    def find_date_event(self, event_id: str) -> Optional[DateEvent]:
        return next((e for e in self.date_events if e.id == event_id), None)

    def find_timed_event(self, event_id: str) -> Optional[TimedEvent]:
        return next((t for t in self.timed_events if t.id == event_id), None)

    def find_shopping_item(self, item_id: str) -> Optional[ShoppingItem]:
        return next((i for i in self.shopping_items if i.id == item_id), None)

    def category_usage(self, category_id: str) -> int:
        """Number of events (date + timed) referencing a category."""
        return (sum(1 for e in self.date_events if e.category_id == category_id)
                + sum(1 for t in self.timed_events if t.category_id == category_id))


class CalendarConfig(BaseModel):
    """Tunable settings, persisted alongside the snapshot."""
    day_capacity: int = Field(DAY_CAPACITY, ge=1, le=20, description="Items shown directly in a day cell")
    upcoming_window_days: int = Field(UPCOMING_WINDOW_DAYS, ge=0, le=366)
    upcoming_limit: int = Field(UPCOMING_LIMIT, ge=1, le=100)
    data_dir: str = DATA_DIR


class DayDisplay(BaseModel):
    """Allocator output for one calendar cell."""
    shown_date_events: List[DateEvent] = Field(default_factory=list)
    shown_timed_events: List[TimedEvent] = Field(default_factory=list)
    has_overflow: bool = False
    total_relevant: int = 0

    @property
    def displayed_count(self) -> int:
        return len(self.shown_date_events) + len(self.shown_timed_events)

    @property
    def hidden_count(self) -> int:
        return max(0, self.total_relevant - self.displayed_count)

    @property
    def items(self) -> List[CalendarEvent]:
        """Cell order: date events first, then timed events by start."""
        return [*self.shown_date_events, *self.shown_timed_events]


class TimelineRow(BaseModel):
    """One 30-minute slot of the single-day timeline."""
    offset: int
    label: str
    events: List[TimedEvent] = Field(default_factory=list)


class UpcomingEntry(BaseModel):
    """One row of the upcoming important events feed."""
    kind: Literal["DATE", "TIMED"]
    event_id: str
    date: str
    start_min: Optional[int] = None
    title: str
    importance: Importance
    category_id: str

    @property
    def time_rank(self) -> int:
        # All-day entries sort before any timed slot on the same date
        return self.start_min if self.start_min is not None else -1


class LeaveBalance(BaseModel):
    """Leave minutes rendered as working days (8h) and hours."""
    d: int
    h: int
    label: str


class MutationResult(BaseModel):
    """Outcome of a mutation: the next snapshot, or a refusal with the unchanged one."""
    ok: bool
    state: AppState
    reason: Optional[RefusalReason] = None
    message: str = ""
    entity_id: Optional[str] = None
    # Dates a weekly repeat could not use because of a time overlap
    conflicts: List[str] = Field(default_factory=list)
