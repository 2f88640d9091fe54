"""
Data Manager for Daybook Calendar
Handles loading and saving the whole calendar snapshot and the app settings
"""
import json
import logging
import math
import os
from datetime import datetime, date
from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, ValidationError

from models.constants import DATA_DIR, SETTINGS_FILE, STATE_FILE
from models.data_models import (
    AppState, CalendarConfig, Category, DateEvent, ShoppingItem, TimedEvent,
)
from core.exceptions import FileOperationError
from core.seed import default_state, ensure_system_categories, ensure_year_holidays

logger = logging.getLogger(__name__)

STATUS_KEYS = {
    "companyName": "company_name",
    "isEmployed": "is_employed",
    "employmentStartDate": "employment_start_date",
    "employmentEndDate": "employment_end_date",
    "remainingLeaveMinutes": "remaining_leave_minutes",
}

def ensure_data_directory(data_dir: str = DATA_DIR):
    """Ensure the data directory exists."""
    if data_dir and not os.path.exists(data_dir):
        os.makedirs(data_dir)

def _is_valid_blob(blob: Any) -> bool:
    return (
        isinstance(blob, dict)
        and isinstance(blob.get("categories"), list)
        and isinstance(blob.get("dateEvents"), list)
        and isinstance(blob.get("timedEvents"), list)
    )

def _load_entities(model: Type[BaseModel], items: List[Any]) -> List[Any]:
    """Validate entities one by one, dropping the ones that do not validate."""
    loaded = []
    for item in items:
        try:
            loaded.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping invalid {model.__name__} from snapshot: {e.errors()[0]['msg']}")
    return loaded

def _load_status(blob: Dict[str, Any]) -> Dict[str, Any]:
    """
    Status bar fields, validated one at a time so a bad field falls back to
    its default without taking the others with it. Negative leave is clamped to 0.
    """
    status = {}
    for key, field in STATUS_KEYS.items():
        value = blob.get(key, blob.get(field))
        if value is None:
            continue
        if (field == "remaining_leave_minutes" and isinstance(value, (int, float))
                and not isinstance(value, bool) and math.isfinite(value)):
            value = max(0, math.floor(value))
        try:
            status[field] = getattr(AppState.model_validate({field: value}), field)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {key} in snapshot: {e.errors()[0]['msg']}")
    return status

def state_from_blob(blob: Any, today: Optional[date] = None) -> AppState:
    """
    Build an AppState from a stored blob (dict, or JSON as str or bytes).
    An absent or malformed blob yields the seed defaults; never raises.
    System categories and the current year's holidays are restored if missing.
    """
    today = today or date.today()

    if isinstance(blob, (str, bytes)):
        try:
            blob = json.loads(blob)
        except ValueError as e:
            logger.warning(f"Stored snapshot is not valid JSON, using defaults: {e}")
            blob = None

    if not _is_valid_blob(blob):
        if blob is not None:
            logger.warning("Stored snapshot is malformed, using defaults")
        return default_state(today)

    shopping = blob.get("shoppingItems")
    state = AppState.model_validate(_load_status(blob)).model_copy(update={
        "categories": _load_entities(Category, blob["categories"]),
        "date_events": _load_entities(DateEvent, blob["dateEvents"]),
        "timed_events": _load_entities(TimedEvent, blob["timedEvents"]),
        "shopping_items": _load_entities(ShoppingItem, shopping if isinstance(shopping, list) else []),
    })
    state = ensure_system_categories(state)
    return ensure_year_holidays(state, today.year)

def state_to_blob(state: AppState) -> Dict[str, Any]:
    """Serialize the snapshot with camelCase keys, JSON-ready."""
    return state.model_dump(mode="json", by_alias=True)

def save_state(state: AppState, path: str = STATE_FILE) -> None:
    """Save the whole snapshot to a JSON file."""
    try:
        ensure_data_directory(os.path.dirname(path))
        data = state_to_blob(state)
        data["lastUpdated"] = datetime.now().isoformat()
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save calendar state: {e}")
        raise FileOperationError(f"Failed to save calendar state: {e}")

def load_state(path: str = STATE_FILE, today: Optional[date] = None) -> AppState:
    """Load the snapshot from a JSON file, falling back to seed defaults."""
    if not os.path.exists(path):
        return state_from_blob(None, today)
    try:
        with open(path, 'rb') as f:
            raw = f.read()
    except OSError as e:
        logger.error(f"Error loading calendar state: {e}")
        return state_from_blob(None, today)
    return state_from_blob(raw, today)

def auto_save_state(state: AppState, path: str = STATE_FILE) -> bool:
    """Best-effort save after a mutation; failures are logged and swallowed."""
    try:
        save_state(state, path)
        return True
    except FileOperationError as e:
        logger.error(f"Auto save failed: {e}")
        return False

def save_settings(config: CalendarConfig, path: str = SETTINGS_FILE) -> None:
    """Save app settings to JSON file."""
    try:
        ensure_data_directory(os.path.dirname(path))
        data = {
            "settings": config.model_dump(),
            "last_updated": datetime.now().isoformat()
        }
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
        raise FileOperationError(f"Failed to save settings: {e}")

def load_settings(path: str = SETTINGS_FILE) -> CalendarConfig:
    """Load app settings from JSON file; invalid or missing settings give defaults."""
    if not os.path.exists(path):
        return CalendarConfig()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return CalendarConfig.model_validate(data.get("settings", {}))
    except (OSError, ValueError, AttributeError, ValidationError) as e:
        logger.error(f"Error loading settings: {e}")
        return CalendarConfig()
