# Cart store

from .actions import Action, ActionType, action
from .reducer import cart_reducer, initial_cart_state
from .cart_store import CartStore, CartOperationResult, StoreRegistry, store_registry
from .sync import CartSyncTask

__all__ = [
    "Action",
    "ActionType",
    "action",
    "cart_reducer",
    "initial_cart_state",
    "CartStore",
    "CartOperationResult",
    "StoreRegistry",
    "store_registry",
    "CartSyncTask",
]
