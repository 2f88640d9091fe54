# =============================================================================
# Shopping List for Daybook Calendar
# =============================================================================

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from models.data_models import AppState, MutationResult, ShoppingItem
from core.exceptions import EntityNotFoundError
from core.mutations import build_entity, merge_patch, mutation, new_id

logger = logging.getLogger(__name__)

def parse_price(value: Any) -> Optional[float]:
    """Price from a form field. Blank or non-numeric input means no price."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        price = float(text)
    except ValueError:
        return None
    return price if math.isfinite(price) else None

def sort_shopping_items(items: Sequence[ShoppingItem]) -> List[ShoppingItem]:
    """HIGH first, then cheapest first; items without a price go last."""
    return sorted(items, key=lambda i: (i.priority.order, i.price if i.price is not None else math.inf))

def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(data)
    if "price" in cleaned:
        cleaned["price"] = parse_price(cleaned["price"])
    if "memo" in cleaned:
        cleaned["memo"] = str(cleaned["memo"] or "").strip()
    return cleaned

@mutation
def add_shopping_item(state: AppState, data: Dict[str, Any]) -> MutationResult:
    payload = {k: v for k, v in _clean(data).items() if k not in ("id", "created_at")}
    item = build_entity(ShoppingItem, {**payload, "id": new_id("shop"), "created_at": datetime.now().isoformat()})
    logger.info(f"Added shopping item {item.id} ({item.name})")
    return MutationResult(ok=True, state=state.model_copy(update={"shopping_items": [*state.shopping_items, item]}),
                          entity_id=item.id)

@mutation
def update_shopping_item(state: AppState, item_id: str, patch: Dict[str, Any]) -> MutationResult:
    current = state.find_shopping_item(item_id)
    if current is None:
        raise EntityNotFoundError(f"Shopping item {item_id} not found")
    updated = merge_patch(ShoppingItem, current, _clean(patch))
    items = [updated if i.id == item_id else i for i in state.shopping_items]
    return MutationResult(ok=True, state=state.model_copy(update={"shopping_items": items}), entity_id=item_id)

@mutation
def complete_shopping_item(state: AppState, item_id: str) -> MutationResult:
    """Bought: the item leaves the list."""
    if state.find_shopping_item(item_id) is None:
        raise EntityNotFoundError(f"Shopping item {item_id} not found")
    items = [i for i in state.shopping_items if i.id != item_id]
    logger.info(f"Completed shopping item {item_id}")
    return MutationResult(ok=True, state=state.model_copy(update={"shopping_items": items}), entity_id=item_id)
