# =============================================================================
# Category / Event Mutations
# =============================================================================
"""
Pure create/update/delete operations over an AppState snapshot.

Every public function returns a MutationResult. Refusals (category in use,
system-protected entity, unknown id, invalid input, time overlap in a weekly
repeat) never raise across this boundary: the result carries the unchanged
snapshot plus a reason code.
"""

import functools
import logging
import time
import uuid
from typing import Any, Dict, Iterable, Type, TypeVar
from pydantic import BaseModel, ValidationError
from models.data_models import (
    AppState, Category, DateEvent, MutationResult, RefusalReason, TimedEvent,
)
from core.exceptions import (
    DeletionBlockedError, EntityNotFoundError, InvalidPatchError, MutationRefusedError,
    TimeOverlapError,
)
from core.day_display import overlapping_timed_events
from core.utils import date_range, parse_local_date, to_local_date

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Fields a patch may never change
IMMUTABLE_FIELDS = {"id", "kind", "created_at", "is_system", "series_id"}

STATUS_FIELDS = {
    "company_name", "is_employed", "employment_start_date",
    "employment_end_date", "remaining_leave_minutes",
}

def mutation(func):
    """Turn MutationRefusedError raised by an operation into a refusal result."""
    @functools.wraps(func)
    def wrapper(state: AppState, *args, **kwargs) -> MutationResult:
        try:
            return func(state, *args, **kwargs)
        except MutationRefusedError as e:
            logger.warning(f"{func.__name__} refused ({e.reason.value}): {e}")
            return MutationResult(ok=False, state=state, reason=e.reason, message=str(e),
                                  conflicts=getattr(e, "conflicts", []))
    return wrapper

def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"

def next_created_at(state: AppState) -> int:
    """Millisecond timestamp strictly greater than any created_at in the snapshot."""
    now_ms = int(time.time() * 1000)
    latest = max((e.created_at for e in [*state.date_events, *state.timed_events]), default=0)
    return max(now_ms, latest + 1)

def build_entity(model: Type[M], data: Dict[str, Any]) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidPatchError(f"Invalid {model.__name__}: {e.error_count()} error(s): {e.errors()[0]['msg']}")

def merge_patch(model: Type[M], current: M, patch: Dict[str, Any]) -> M:
    """Apply a partial patch and re-validate the merged entity."""
    locked = IMMUTABLE_FIELDS & set(patch)
    if locked:
        raise InvalidPatchError(f"Cannot change {', '.join(sorted(locked))}")
    unknown = set(patch) - set(model.model_fields)
    if unknown:
        raise InvalidPatchError(f"Unknown field(s): {', '.join(sorted(unknown))}")
    return build_entity(model, {**current.model_dump(), **patch})

def _require_category(state: AppState, category_id: str) -> None:
    if state.find_category(category_id) is None:
        raise MutationRefusedError(f"Category {category_id} does not exist",
                                   RefusalReason.CATEGORY_NOT_FOUND)

# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------

@mutation
def add_category(state: AppState, name: str, color: str) -> MutationResult:
    trimmed = (name or "").strip()
    if not trimmed:
        raise InvalidPatchError("Category name is empty")
    category = build_entity(Category, {"id": new_id("cat"), "name": trimmed, "color": color, "is_enabled": True})
    logger.info(f"Added category {category.id} ({category.name})")
    return MutationResult(ok=True, state=state.model_copy(update={"categories": [*state.categories, category]}),
                          entity_id=category.id)

@mutation
def update_category(state: AppState, category_id: str, patch: Dict[str, Any]) -> MutationResult:
    current = state.find_category(category_id)
    if current is None:
        raise EntityNotFoundError(f"Category {category_id} not found")
    updated = merge_patch(Category, current, patch)
    categories = [updated if c.id == category_id else c for c in state.categories]
    return MutationResult(ok=True, state=state.model_copy(update={"categories": categories}),
                          entity_id=category_id)

@mutation
def delete_category(state: AppState, category_id: str) -> MutationResult:
    """Remove a category unless it is a system category or still referenced."""
    current = state.find_category(category_id)
    if current is None:
        raise EntityNotFoundError(f"Category {category_id} not found")
    if current.is_system:
        raise DeletionBlockedError(f"{current.name} is a system category and cannot be deleted")
    used = state.category_usage(category_id)
    if used > 0:
        raise DeletionBlockedError(f"This category is in use by {used} event(s). Delete is blocked.",
                                   RefusalReason.CATEGORY_IN_USE)
    categories = [c for c in state.categories if c.id != category_id]
    logger.info(f"Deleted category {category_id}")
    return MutationResult(ok=True, state=state.model_copy(update={"categories": categories}),
                          entity_id=category_id)

# -----------------------------------------------------------------------------
# Date events
# -----------------------------------------------------------------------------

@mutation
def add_date_event(state: AppState, data: Dict[str, Any]) -> MutationResult:
    payload = {k: v for k, v in data.items() if k not in ("id", "kind", "created_at")}
    event = build_entity(DateEvent, {**payload, "id": new_id("de"), "created_at": next_created_at(state)})
    _require_category(state, event.category_id)
    logger.info(f"Added date event {event.id} on {event.date}")
    return MutationResult(ok=True, state=state.model_copy(update={"date_events": [*state.date_events, event]}),
                          entity_id=event.id)

@mutation
def update_date_event(state: AppState, event_id: str, patch: Dict[str, Any]) -> MutationResult:
    current = state.find_date_event(event_id)
    if current is None:
        raise EntityNotFoundError(f"Date event {event_id} not found")
    updated = merge_patch(DateEvent, current, patch)
    if updated.category_id != current.category_id:
        _require_category(state, updated.category_id)
    date_events = [updated if e.id == event_id else e for e in state.date_events]
    return MutationResult(ok=True, state=state.model_copy(update={"date_events": date_events}),
                          entity_id=event_id)

@mutation
def delete_date_event(state: AppState, event_id: str) -> MutationResult:
    current = state.find_date_event(event_id)
    if current is None:
        raise EntityNotFoundError(f"Date event {event_id} not found")
    if current.is_system:
        raise DeletionBlockedError(f"{current.title} is a system event; disable it instead")
    date_events = [e for e in state.date_events if e.id != event_id]
    logger.info(f"Deleted date event {event_id}")
    return MutationResult(ok=True, state=state.model_copy(update={"date_events": date_events}),
                          entity_id=event_id)

# -----------------------------------------------------------------------------
# Timed events
# -----------------------------------------------------------------------------

@mutation
def add_timed_event(state: AppState, data: Dict[str, Any]) -> MutationResult:
    payload = {k: v for k, v in data.items() if k not in ("id", "kind", "created_at", "series_id")}
    event = build_entity(TimedEvent, {**payload, "id": new_id("te"), "created_at": next_created_at(state)})
    _require_category(state, event.category_id)
    logger.info(f"Added timed event {event.id} on {event.anchor_date} at offset {event.start_min}")
    return MutationResult(ok=True, state=state.model_copy(update={"timed_events": [*state.timed_events, event]}),
                          entity_id=event.id)

@mutation
def add_timed_series(state: AppState, data: Dict[str, Any], weekdays: Iterable[int], end_date: str,
                     skip_conflicts: bool = False) -> MutationResult:
    """
    Weekly repeat: one timed event per selected weekday (Monday=0) from the
    template's anchor date through end_date, all sharing a series_id.

    A date whose range overlaps an existing timed event is a conflict. By
    default any conflict refuses the whole series; with skip_conflicts the
    other dates are created. Conflicting dates are reported in the result.
    """
    try:
        days = {int(d) for d in weekdays}
    except (TypeError, ValueError):
        raise InvalidPatchError(f"Repeat days must be weekday numbers, got {weekdays!r}")
    if not days:
        raise InvalidPatchError("Select at least one repeat day")
    if not days <= set(range(7)):
        raise InvalidPatchError(f"Repeat days must be 0 (Mon) to 6 (Sun), got {sorted(days)}")

    payload = {k: v for k, v in data.items() if k not in ("id", "kind", "created_at", "series_id")}
    template = build_entity(TimedEvent, {**payload, "id": "te_template", "created_at": 0})
    _require_category(state, template.category_id)

    first = parse_local_date(template.anchor_date)
    last = parse_local_date(end_date)
    if first is None or last is None:
        raise InvalidPatchError(f"Invalid repeat range {template.anchor_date!r} to {end_date!r}")
    if last < first:
        raise InvalidPatchError("Repeat end date must be on or after the start date")

    targets = []
    conflicts = []
    for day in date_range(first, last):
        if day.weekday() not in days:
            continue
        ymd = to_local_date(day)
        if overlapping_timed_events(state.timed_events, ymd, template.start_min, template.end_min):
            conflicts.append(ymd)
        else:
            targets.append(ymd)

    if conflicts and (not skip_conflicts or not targets):
        raise TimeOverlapError(f"Time overlap on: {', '.join(conflicts)}", conflicts)
    if not targets:
        raise InvalidPatchError("No date in the repeat range falls on the selected days")

    series_id = new_id("series")
    created_at = next_created_at(state)
    events = [
        template.model_copy(update={"id": new_id("te"), "anchor_date": ymd, "series_id": series_id,
                                    "created_at": created_at + i})
        for i, ymd in enumerate(targets)
    ]
    if conflicts:
        logger.warning(f"Series {series_id} skipped overlapping dates: {', '.join(conflicts)}")
    logger.info(f"Added series {series_id}: {len(events)} timed event(s) through {end_date}")
    return MutationResult(ok=True, state=state.model_copy(update={"timed_events": [*state.timed_events, *events]}),
                          entity_id=series_id, conflicts=conflicts)

@mutation
def update_timed_event(state: AppState, event_id: str, patch: Dict[str, Any]) -> MutationResult:
    """Merge a patch; the merged event must still end after it starts."""
    current = state.find_timed_event(event_id)
    if current is None:
        raise EntityNotFoundError(f"Timed event {event_id} not found")
    updated = merge_patch(TimedEvent, current, patch)
    if updated.category_id != current.category_id:
        _require_category(state, updated.category_id)
    timed_events = [updated if t.id == event_id else t for t in state.timed_events]
    return MutationResult(ok=True, state=state.model_copy(update={"timed_events": timed_events}),
                          entity_id=event_id)

@mutation
def delete_timed_event(state: AppState, event_id: str) -> MutationResult:
    if state.find_timed_event(event_id) is None:
        raise EntityNotFoundError(f"Timed event {event_id} not found")
    timed_events = [t for t in state.timed_events if t.id != event_id]
    logger.info(f"Deleted timed event {event_id}")
    return MutationResult(ok=True, state=state.model_copy(update={"timed_events": timed_events}),
                          entity_id=event_id)

# -----------------------------------------------------------------------------
# Status bar
# -----------------------------------------------------------------------------

@mutation
def update_status(state: AppState, patch: Dict[str, Any]) -> MutationResult:
    """Company, employment and leave fields. Re-employment clears the end date."""
    unknown = set(patch) - STATUS_FIELDS
    if unknown:
        raise InvalidPatchError(f"Unknown status field(s): {', '.join(sorted(unknown))}")

    update = dict(patch)
    if "remaining_leave_minutes" in update:
        try:
            update["remaining_leave_minutes"] = max(0, int(update["remaining_leave_minutes"]))
        except (TypeError, ValueError):
            raise InvalidPatchError(f"Leave minutes must be a number, got {patch['remaining_leave_minutes']!r}")
    for key in ("company_name", "employment_start_date", "employment_end_date"):
        if key in update:
            update[key] = str(update[key] or "").strip()
    if "is_employed" in update:
        update["is_employed"] = bool(update["is_employed"])
    if update.get("is_employed") is True:
        update["employment_end_date"] = ""

    return MutationResult(ok=True, state=state.model_copy(update=update))
