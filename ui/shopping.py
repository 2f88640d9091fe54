# =============================================================================
# Shopping List Panel for Daybook Calendar
# =============================================================================

import streamlit as st

from models.data_models import ShoppingItem, ShoppingPriority
from core.shopping import add_shopping_item, complete_shopping_item, sort_shopping_items, update_shopping_item
from ui.session import apply_result, get_state

PRIORITY_OPTIONS = [p.value for p in ShoppingPriority]

def price_label(item: ShoppingItem) -> str:
    return f"{item.price:,.0f}" if item.price is not None else "-"

def render_shopping_item(item: ShoppingItem):
    with st.expander(f"{item.name} · {item.priority.value} · {price_label(item)}"):
        if item.memo:
            st.caption(item.memo)
        with st.form(f"shop_edit_{item.id}"):
            name = st.text_input("Item", value=item.name)
            priority = st.selectbox("Priority", PRIORITY_OPTIONS, index=PRIORITY_OPTIONS.index(item.priority.value))
            price = st.text_input("Price", value="" if item.price is None else f"{item.price:g}")
            memo = st.text_input("Memo", value=item.memo)
            col1, col2 = st.columns(2)
            save = col1.form_submit_button("Save")
            done = col2.form_submit_button("Bought ✓")
        if save and name.strip():
            if apply_result(update_shopping_item(get_state(), item.id, {
                "name": name, "priority": priority, "price": price, "memo": memo,
            })):
                st.rerun()
        if done:
            if apply_result(complete_shopping_item(get_state(), item.id)):
                st.rerun()

def render_shopping_panel():
    """Shopping list sorted by priority, then price."""
    state = get_state()
    st.markdown(f"**Shopping list** {len(state.shopping_items)}")
    for item in sort_shopping_items(state.shopping_items):
        render_shopping_item(item)

    with st.form("add_shopping_item", clear_on_submit=True):
        name = st.text_input("New item")
        col1, col2 = st.columns(2)
        priority = col1.selectbox("Priority", PRIORITY_OPTIONS, index=1)
        price = col2.text_input("Price (optional)")
        memo = st.text_input("Memo (optional)")
        if st.form_submit_button("Add item") and name.strip():
            if apply_result(add_shopping_item(get_state(), {
                "name": name, "priority": priority, "price": price, "memo": memo,
            })):
                st.rerun()
