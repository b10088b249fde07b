"""
Cart reducer

Pure function from (state, action) to the next state. Every operation
moves through start -> success | failure: the start action raises the
loading flag of its family, success installs the new data, and failure
keeps the previous data and records the error. Timestamps are taken
from the action, never from the clock.
"""

from typing import Callable

from ..models.cart import CartItem, CartState
from ..services.coupons import add_coupon_discount, remove_coupon_discount
from ..services.pricing import merge_cart_item, reprice_item
from ..services.totals import calculate_cart_totals
from .actions import Action, ActionType

initial_cart_state = CartState()


def _with_items(state: CartState, action: Action, items: list[CartItem], **update) -> CartState:
    """New state holding the given items with totals recomputed"""
    totals = calculate_cart_totals(items)
    return state.model_copy(
        update={
            "items": {item.product_id: item for item in items},
            "total_items": totals.total_items,
            "subtotal": totals.subtotal,
            "total_savings": totals.total_savings,
            "last_updated": action.get("at"),
            "revision": state.revision + 1,
            **update,
        }
    )


def _emptied(state: CartState, action: Action, **update) -> CartState:
    """New state with no items and no coupons"""
    return _with_items(state, action, [], applied_coupons=[], coupon_discount=0.0, **update)


def _merge(state: CartState, new_items: list[CartItem]) -> list[CartItem]:
    items = dict(state.items)
    for new_item in new_items:
        existing = items.get(new_item.product_id)
        items[new_item.product_id] = merge_cart_item(existing, new_item) if existing else new_item
    return list(items.values())


def _start(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"loading": True, "error": None})


def _failure(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"loading": False, "error": action.get("error")})


# Load

def _load(state: CartState, action: Action) -> CartState:
    company_id = action.get("company_id")
    if company_id != state.company_id:
        # Switching company starts from an empty cart
        return CartState(
            company_id=company_id,
            loading=True,
            sidebar_open=state.sidebar_open,
            revision=state.revision + 1,
        )
    return _start(state, action)


def _load_success(state: CartState, action: Action) -> CartState:
    return _with_items(
        state,
        action,
        action.get("items", []),
        company_id=action.get("company_id"),
        company_name=action.get("company_name"),
        applied_coupons=action.get("applied_coupons", []),
        coupon_discount=action.get("coupon_discount", 0.0),
        loading=False,
        error=None,
    )


def _load_failure(state: CartState, action: Action) -> CartState:
    # An unreadable cart falls back to an empty one
    return _emptied(state, action, loading=False, error=action.get("error"))


# Items

def _add_success(state: CartState, action: Action) -> CartState:
    items = _merge(state, [action.get("item")])
    return _with_items(state, action, items, loading=False, error=None)


def _add_offer_items_success(state: CartState, action: Action) -> CartState:
    items = _merge(state, action.get("items", []))
    return _with_items(state, action, items, loading=False, error=None)


def _update_success(state: CartState, action: Action) -> CartState:
    product_id = action.get("product_id")
    quantity = action.get("quantity")

    if quantity == 0:
        items = [i for i in state.item_list if i.product_id != product_id]
    else:
        items = []
        for item in state.item_list:
            if item.product_id == product_id:
                added_at = action.get("at") or item.added_at
                item = reprice_item(item.model_copy(update={"quantity": quantity, "added_at": added_at}))
            items.append(item)
    return _with_items(state, action, items, loading=False, error=None)


def _remove_success(state: CartState, action: Action) -> CartState:
    product_id = action.get("product_id")
    items = [i for i in state.item_list if i.product_id != product_id]
    return _with_items(state, action, items, loading=False, error=None)


def _clear_success(state: CartState, action: Action) -> CartState:
    return _emptied(state, action, loading=False, error=None)


# Sync

def _sync(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"syncing": True, "error": None})


def _sync_success(state: CartState, action: Action) -> CartState:
    return _with_items(
        state,
        action,
        action.get("items", []),
        applied_coupons=action.get("applied_coupons", state.applied_coupons),
        coupon_discount=action.get("coupon_discount", state.coupon_discount),
        syncing=False,
        error=None,
    )


def _sync_failure(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"syncing": False, "error": action.get("error")})


def _sync_skipped(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"syncing": False})


# Coupons

def _coupon_start(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"is_coupon_loading": True, "coupon_error": None})


def _coupon_failure(state: CartState, action: Action) -> CartState:
    return state.model_copy(
        update={"is_coupon_loading": False, "coupon_error": action.get("error")}
    )


def _apply_coupon_success(state: CartState, action: Action) -> CartState:
    coupon = action.get("coupon")
    return state.model_copy(
        update={
            "applied_coupons": [*state.applied_coupons, coupon],
            "coupon_discount": add_coupon_discount(state.coupon_discount, coupon.discount_amount),
            "is_coupon_loading": False,
            "coupon_error": None,
            "revision": state.revision + 1,
        }
    )


def _remove_coupon_success(state: CartState, action: Action) -> CartState:
    coupon_id = action.get("coupon_id")
    removed = next((c for c in state.applied_coupons if c.id == coupon_id), None)
    coupon_discount = state.coupon_discount
    if removed:
        coupon_discount = remove_coupon_discount(coupon_discount, removed.discount_amount)

    return state.model_copy(
        update={
            "applied_coupons": [c for c in state.applied_coupons if c.id != coupon_id],
            "coupon_discount": coupon_discount,
            "is_coupon_loading": False,
            "coupon_error": None,
            "revision": state.revision + 1,
        }
    )


# Order, errors and sidebar

def _order_completed(state: CartState, action: Action) -> CartState:
    return _emptied(state, action, loading=False, error=None)


def _clear_error(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"error": None})


def _clear_coupon_error(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"coupon_error": None})


def _toggle_sidebar(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"sidebar_open": not state.sidebar_open})


def _open_sidebar(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"sidebar_open": True})


def _close_sidebar(state: CartState, action: Action) -> CartState:
    return state.model_copy(update={"sidebar_open": False})


_HANDLERS: dict[ActionType, Callable[[CartState, Action], CartState]] = {
    ActionType.LOAD: _load,
    ActionType.LOAD_SUCCESS: _load_success,
    ActionType.LOAD_FAILURE: _load_failure,
    ActionType.ADD_ITEM: _start,
    ActionType.ADD_ITEM_SUCCESS: _add_success,
    ActionType.ADD_ITEM_FAILURE: _failure,
    ActionType.ADD_OFFER_ITEMS_SUCCESS: _add_offer_items_success,
    ActionType.UPDATE_ITEM: _start,
    ActionType.UPDATE_ITEM_SUCCESS: _update_success,
    ActionType.UPDATE_ITEM_FAILURE: _failure,
    ActionType.REMOVE_ITEM: _start,
    ActionType.REMOVE_ITEM_SUCCESS: _remove_success,
    ActionType.REMOVE_ITEM_FAILURE: _failure,
    ActionType.CLEAR: _start,
    ActionType.CLEAR_SUCCESS: _clear_success,
    ActionType.CLEAR_FAILURE: _failure,
    ActionType.SYNC: _sync,
    ActionType.SYNC_SUCCESS: _sync_success,
    ActionType.SYNC_FAILURE: _sync_failure,
    ActionType.SYNC_SKIPPED: _sync_skipped,
    ActionType.APPLY_COUPON: _coupon_start,
    ActionType.APPLY_COUPON_SUCCESS: _apply_coupon_success,
    ActionType.APPLY_COUPON_FAILURE: _coupon_failure,
    ActionType.REMOVE_COUPON: _coupon_start,
    ActionType.REMOVE_COUPON_SUCCESS: _remove_coupon_success,
    ActionType.REMOVE_COUPON_FAILURE: _coupon_failure,
    ActionType.ORDER_COMPLETED: _order_completed,
    ActionType.CLEAR_ERROR: _clear_error,
    ActionType.CLEAR_COUPON_ERROR: _clear_coupon_error,
    ActionType.TOGGLE_SIDEBAR: _toggle_sidebar,
    ActionType.OPEN_SIDEBAR: _open_sidebar,
    ActionType.CLOSE_SIDEBAR: _close_sidebar,
}


def cart_reducer(state: CartState, action: Action) -> CartState:
    """Apply one action to a cart state"""
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action)
