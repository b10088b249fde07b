"""Cart store actions"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ActionType(str, Enum):
    """Everything that can happen to a cart state"""
    LOAD = "load"
    LOAD_SUCCESS = "load_success"
    LOAD_FAILURE = "load_failure"

    ADD_ITEM = "add_item"
    ADD_ITEM_SUCCESS = "add_item_success"
    ADD_ITEM_FAILURE = "add_item_failure"
    ADD_OFFER_ITEMS_SUCCESS = "add_offer_items_success"

    UPDATE_ITEM = "update_item"
    UPDATE_ITEM_SUCCESS = "update_item_success"
    UPDATE_ITEM_FAILURE = "update_item_failure"

    REMOVE_ITEM = "remove_item"
    REMOVE_ITEM_SUCCESS = "remove_item_success"
    REMOVE_ITEM_FAILURE = "remove_item_failure"

    CLEAR = "clear"
    CLEAR_SUCCESS = "clear_success"
    CLEAR_FAILURE = "clear_failure"

    SYNC = "sync"
    SYNC_SUCCESS = "sync_success"
    SYNC_FAILURE = "sync_failure"
    SYNC_SKIPPED = "sync_skipped"

    APPLY_COUPON = "apply_coupon"
    APPLY_COUPON_SUCCESS = "apply_coupon_success"
    APPLY_COUPON_FAILURE = "apply_coupon_failure"

    REMOVE_COUPON = "remove_coupon"
    REMOVE_COUPON_SUCCESS = "remove_coupon_success"
    REMOVE_COUPON_FAILURE = "remove_coupon_failure"

    ORDER_COMPLETED = "order_completed"

    CLEAR_ERROR = "clear_error"
    CLEAR_COUPON_ERROR = "clear_coupon_error"

    TOGGLE_SIDEBAR = "toggle_sidebar"
    OPEN_SIDEBAR = "open_sidebar"
    CLOSE_SIDEBAR = "close_sidebar"


@dataclass(frozen=True)
class Action:
    """A single state transition request"""
    type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


def action(action_type: ActionType, **payload: Any) -> Action:
    """Build an action stamped with the time it was created at"""
    payload.setdefault("at", datetime.utcnow())
    return Action(type=action_type, payload=payload)


FAILURE_ACTIONS = frozenset({
    ActionType.LOAD_FAILURE,
    ActionType.ADD_ITEM_FAILURE,
    ActionType.UPDATE_ITEM_FAILURE,
    ActionType.REMOVE_ITEM_FAILURE,
    ActionType.CLEAR_FAILURE,
    ActionType.SYNC_FAILURE,
})

COUPON_FAILURE_ACTIONS = frozenset({
    ActionType.APPLY_COUPON_FAILURE,
    ActionType.REMOVE_COUPON_FAILURE,
})
