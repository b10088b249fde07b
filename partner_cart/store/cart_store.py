"""
Cart Store

Holds the cart state of one company context. State only changes through
dispatch(), which runs the reducer synchronously. Operations run their
async effect between a start action and a success or failure action;
mutating operations are serialized by a lock so each one completes before
the next starts. Operations return a CartOperationResult and never raise
CartError.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..core.errors import BackendError, CartError, CartValidationError, ErrorKind
from ..models.cart import CartState, CartSummary
from ..services.cart_service import CartService
from ..services.totals import build_summary
from .actions import Action, ActionType, COUPON_FAILURE_ACTIONS, FAILURE_ACTIONS, action
from .reducer import cart_reducer, initial_cart_state
from .sync import CartSyncTask

logger = logging.getLogger(__name__)

NO_COMPANY_ERROR = "Company information not available"


class CartOperationResult(BaseModel):
    """Outcome of a store operation"""
    success: bool
    state: CartState
    error_message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    # Sync result dropped because a newer sync or a mutation overtook it
    discarded: bool = False


class CartStore:
    """Single-writer store for a company cart"""

    def __init__(
        self,
        service: Optional[CartService] = None,
        settings: Optional[Settings] = None,
    ):
        self.service = service or CartService()
        self.settings = settings or get_settings()
        self.state: CartState = initial_cart_state
        self._lock = asyncio.Lock()
        self._sync_seq = 0
        self._sync_task: Optional[CartSyncTask] = None

    @property
    def summary(self) -> CartSummary:
        return build_summary(self.state, self.settings)

    @property
    def syncing_in_background(self) -> bool:
        return self._sync_task is not None and self._sync_task.running

    def dispatch(self, cart_action: Action) -> CartState:
        """Apply an action to the current state"""
        self.state = cart_reducer(self.state, cart_action)
        if cart_action.type in FAILURE_ACTIONS or cart_action.type in COUPON_FAILURE_ACTIONS:
            logger.warning(
                f"Cart {self.state.company_id}: {cart_action.type.value}: {cart_action.get('error')}"
            )
        return self.state

    def _ok(self) -> CartOperationResult:
        return CartOperationResult(success=True, state=self.state)

    def _failed(self, message: str, kind: ErrorKind) -> CartOperationResult:
        return CartOperationResult(
            success=False, state=self.state, error_message=message, error_kind=kind
        )

    async def _run(
        self,
        start: Action,
        effect: Callable[[], Awaitable[Any]],
        on_success: Callable[[Any], Action],
        failure_type: ActionType,
        requires_company: bool = True,
    ) -> CartOperationResult:
        async with self._lock:
            if requires_company and not self.state.company_id:
                self.dispatch(start)
                self.dispatch(action(failure_type, error=NO_COMPANY_ERROR))
                return self._failed(NO_COMPANY_ERROR, ErrorKind.VALIDATION)

            self.dispatch(start)
            try:
                result = await effect()
            except CartError as e:
                self.dispatch(action(failure_type, error=e.message))
                return self._failed(e.message, e.kind)
            except Exception as e:
                logger.exception(f"Cart {self.state.company_id}: {start.type.value} failed")
                error = BackendError(f"Unexpected error: {e}")
                self.dispatch(action(failure_type, error=error.message))
                return self._failed(error.message, error.kind)

            self.dispatch(on_success(result))
            return self._ok()

    # Operations

    async def load(self, company_id: str) -> CartOperationResult:
        """Load the cart of a company, switching company context if needed"""
        if company_id != self.state.company_id:
            await self.stop_sync()

        result = await self._run(
            action(ActionType.LOAD, company_id=company_id),
            lambda: self.service.load_cart(company_id),
            lambda loaded: action(
                ActionType.LOAD_SUCCESS,
                company_id=company_id,
                company_name=loaded.company_name,
                items=loaded.items,
                applied_coupons=loaded.applied_coupons,
                coupon_discount=loaded.coupon_discount,
            ),
            ActionType.LOAD_FAILURE,
            requires_company=False,
        )

        if result.success and self.settings.sync_enabled:
            self.start_sync()
        return result

    async def add_item(self, product_id: str, quantity: int) -> CartOperationResult:
        return await self._run(
            action(ActionType.ADD_ITEM, product_id=product_id, quantity=quantity),
            lambda: self.service.add_to_cart(self.state.company_id, product_id, quantity),
            lambda item: action(ActionType.ADD_ITEM_SUCCESS, item=item),
            ActionType.ADD_ITEM_FAILURE,
        )

    async def add_offer(self, offer_id: str) -> CartOperationResult:
        """Add all products of a partner offer"""
        return await self._run(
            action(ActionType.ADD_ITEM, offer_id=offer_id),
            lambda: self.service.add_offer_to_cart(self.state.company_id, offer_id),
            lambda items: action(ActionType.ADD_OFFER_ITEMS_SUCCESS, items=items),
            ActionType.ADD_ITEM_FAILURE,
        )

    async def update_item(self, product_id: str, quantity: int) -> CartOperationResult:
        return await self._run(
            action(ActionType.UPDATE_ITEM, product_id=product_id, quantity=quantity),
            lambda: self.service.update_cart_item(self.state.company_id, product_id, quantity),
            lambda _: action(ActionType.UPDATE_ITEM_SUCCESS, product_id=product_id, quantity=quantity),
            ActionType.UPDATE_ITEM_FAILURE,
        )

    async def remove_item(self, product_id: str) -> CartOperationResult:
        return await self._run(
            action(ActionType.REMOVE_ITEM, product_id=product_id),
            lambda: self.service.remove_from_cart(self.state.company_id, product_id),
            lambda _: action(ActionType.REMOVE_ITEM_SUCCESS, product_id=product_id),
            ActionType.REMOVE_ITEM_FAILURE,
        )

    async def clear(self) -> CartOperationResult:
        return await self._run(
            action(ActionType.CLEAR),
            lambda: self.service.clear_cart(self.state.company_id),
            lambda _: action(ActionType.CLEAR_SUCCESS),
            ActionType.CLEAR_FAILURE,
        )

    async def complete_order(self) -> CartOperationResult:
        """Reset the cart after an order was placed from it"""
        return await self._run(
            action(ActionType.CLEAR),
            lambda: self.service.clear_cart(self.state.company_id),
            lambda _: action(ActionType.ORDER_COMPLETED),
            ActionType.CLEAR_FAILURE,
        )

    async def apply_coupon(self, code: str) -> CartOperationResult:
        if not code or not code.strip():
            async with self._lock:
                self.dispatch(action(ActionType.APPLY_COUPON, code=code))
                error = CartValidationError("Please enter a coupon code")
                self.dispatch(action(ActionType.APPLY_COUPON_FAILURE, error=error.message))
                return self._failed(error.message, error.kind)

        return await self._run(
            action(ActionType.APPLY_COUPON, code=code),
            lambda: self.service.apply_coupon(self.state.company_id, code, self.state.item_list),
            lambda coupon: action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon),
            ActionType.APPLY_COUPON_FAILURE,
        )

    async def remove_coupon(self, coupon_id: str) -> CartOperationResult:
        return await self._run(
            action(ActionType.REMOVE_COUPON, coupon_id=coupon_id),
            lambda: self.service.remove_coupon(self.state.company_id, coupon_id),
            lambda _: action(ActionType.REMOVE_COUPON_SUCCESS, coupon_id=coupon_id),
            ActionType.REMOVE_COUPON_FAILURE,
        )

    async def sync(self) -> CartOperationResult:
        """
        Re-read the cart from storage.

        Syncs do not take the mutation lock. Each sync gets a sequence
        number and remembers the state revision it started from; its result
        is only applied if no newer sync started and no mutation landed in
        the meantime.
        """
        company_id = self.state.company_id
        if not company_id:
            return self._failed(NO_COMPANY_ERROR, ErrorKind.VALIDATION)

        self._sync_seq += 1
        seq = self._sync_seq
        revision = self.state.revision
        self.dispatch(action(ActionType.SYNC, company_id=company_id))

        try:
            loaded = await self.service.load_cart(company_id)
        except CartError as e:
            if seq == self._sync_seq:
                self.dispatch(action(ActionType.SYNC_FAILURE, error=e.message))
            return self._failed(e.message, e.kind)
        except Exception as e:
            logger.exception(f"Cart {company_id}: sync #{seq} failed")
            error = BackendError(f"Unexpected error: {e}")
            if seq == self._sync_seq:
                self.dispatch(action(ActionType.SYNC_FAILURE, error=error.message))
            return self._failed(error.message, error.kind)

        latest = seq == self._sync_seq
        if not latest or revision != self.state.revision or company_id != self.state.company_id:
            logger.debug(f"Discarding stale sync #{seq} for {company_id}")
            if latest:
                self.dispatch(action(ActionType.SYNC_SKIPPED))
            return CartOperationResult(success=True, state=self.state, discarded=True)

        self.dispatch(
            action(
                ActionType.SYNC_SUCCESS,
                items=loaded.items,
                applied_coupons=loaded.applied_coupons,
                coupon_discount=loaded.coupon_discount,
            )
        )
        return self._ok()

    # Background sync

    def start_sync(self) -> None:
        if self._sync_task is None:
            self._sync_task = CartSyncTask(self, self.settings.sync_interval_seconds)
        self._sync_task.start()

    async def stop_sync(self) -> None:
        if self._sync_task is not None:
            await self._sync_task.stop()
            self._sync_task = None

    async def close(self) -> None:
        await self.stop_sync()


class StoreRegistry:
    """One cart store per company"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self.stores: dict[str, CartStore] = {}

    def get(self, company_id: str) -> CartStore:
        store = self.stores.get(company_id)
        if store is None:
            store = CartStore(settings=self.settings)
            self.stores[company_id] = store
        return store

    async def close_all(self) -> None:
        """Stop background syncs and drop every store"""
        for store in self.stores.values():
            await store.close()
        self.stores.clear()


# Singleton instance
store_registry = StoreRegistry()
