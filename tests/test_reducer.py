"""Tests for the cart reducer."""

from datetime import datetime

from partner_cart.models.cart import AppliedCoupon, CartState
from partner_cart.models.coupon import CouponType
from partner_cart.store.actions import ActionType, action
from partner_cart.store.reducer import cart_reducer, initial_cart_state


def run(state, *actions):
    for cart_action in actions:
        state = cart_reducer(state, cart_action)
    return state


def loaded(company_id="comp-001", items=None):
    return run(
        initial_cart_state,
        action(ActionType.LOAD, company_id=company_id),
        action(ActionType.LOAD_SUCCESS, company_id=company_id, company_name="Test Co", items=items or []),
    )


def coupon(discount_amount=2.0, coupon_id="cpn-001"):
    return AppliedCoupon(
        id=coupon_id,
        code=coupon_id.upper(),
        type=CouponType.PERCENTAGE,
        value=10.0,
        discount_amount=discount_amount,
    )


class TestCartScenario:
    def test_add_coupon_remove_clear(self, make_item):
        state = loaded()

        state = run(state, action(ActionType.ADD_ITEM_SUCCESS, item=make_item("P1", quantity=2)))
        assert state.subtotal == 20.0
        assert state.total_savings == 10.0

        state = run(state, action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon(2.0)))
        assert state.coupon_discount == 2.0

        state = run(state, action(ActionType.REMOVE_ITEM_SUCCESS, product_id="P1"))
        assert state.items == {}
        assert state.subtotal == 0.0
        # Coupons are not tied to items and stay until the cart is cleared
        assert len(state.applied_coupons) == 1
        assert state.coupon_discount == 2.0

        state = run(state, action(ActionType.CLEAR), action(ActionType.CLEAR_SUCCESS))
        assert state.applied_coupons == []
        assert state.coupon_discount == 0.0
        assert state.company_id == "comp-001"


class TestItems:
    def test_same_product_merges(self, make_item):
        state = run(
            loaded(),
            action(ActionType.ADD_ITEM_SUCCESS, item=make_item("P1", quantity=2)),
            action(ActionType.ADD_ITEM_SUCCESS, item=make_item("P1", quantity=3)),
        )
        assert list(state.items) == ["P1"]
        assert state.items["P1"].quantity == 5
        assert state.items["P1"].total_price == 50.0
        assert state.total_items == 5

    def test_offer_items_merge(self, make_item):
        state = run(
            loaded(items=[make_item("P1", quantity=1)]),
            action(ActionType.ADD_OFFER_ITEMS_SUCCESS, items=[make_item("P1", quantity=1), make_item("P2", quantity=4)]),
        )
        assert state.items["P1"].quantity == 2
        assert state.items["P2"].quantity == 4

    def test_update_reprices_tier(self, tiered_item):
        state = run(
            loaded(items=[tiered_item(quantity=1)]),
            action(ActionType.UPDATE_ITEM_SUCCESS, product_id="T1", quantity=10),
        )
        assert state.items["T1"].unit_price == 90.0
        assert state.items["T1"].applied_tier == 2
        assert state.subtotal == 900.0

    def test_update_to_zero_removes(self, make_item):
        state = run(
            loaded(items=[make_item("P1")]),
            action(ActionType.UPDATE_ITEM_SUCCESS, product_id="P1", quantity=0),
        )
        assert state.items == {}

    def test_failure_keeps_items_and_records_error(self, make_item):
        state = run(loaded(items=[make_item("P1")]), action(ActionType.ADD_ITEM, product_id="P2", quantity=1))
        assert state.loading

        state = run(state, action(ActionType.ADD_ITEM_FAILURE, error="Product not found"))
        assert not state.loading
        assert state.error == "Product not found"
        assert list(state.items) == ["P1"]

    def test_revision_bumps_on_item_change(self, make_item):
        state = loaded()
        after = run(state, action(ActionType.ADD_ITEM_SUCCESS, item=make_item()))
        assert after.revision > state.revision

    def test_reducer_does_not_mutate_input(self, make_item):
        state = loaded()
        run(state, action(ActionType.ADD_ITEM_SUCCESS, item=make_item()))
        assert state.items == {}


class TestLoad:
    def test_switching_company_resets_cart(self, make_item):
        state = run(loaded(items=[make_item()]), action(ActionType.OPEN_SIDEBAR))
        state = run(state, action(ActionType.LOAD, company_id="comp-002"))

        assert state.company_id == "comp-002"
        assert state.items == {}
        assert state.loading
        assert state.sidebar_open

    def test_reload_same_company_keeps_items(self, make_item):
        state = run(loaded(items=[make_item()]), action(ActionType.LOAD, company_id="comp-001"))
        assert list(state.items) == ["P1"]
        assert state.loading

    def test_load_failure_falls_back_to_empty_cart(self, make_item):
        state = run(
            loaded(items=[make_item()]),
            action(ActionType.LOAD, company_id="comp-001"),
            action(ActionType.LOAD_FAILURE, error="Failed to load cart"),
        )
        assert state.items == {}
        assert state.error == "Failed to load cart"
        assert not state.loading


class TestCoupons:
    def test_coupon_flags(self):
        state = run(loaded(), action(ActionType.APPLY_COUPON, code="X"))
        assert state.is_coupon_loading
        assert not state.loading

        state = run(state, action(ActionType.APPLY_COUPON_FAILURE, error="Coupon not found"))
        assert not state.is_coupon_loading
        assert state.coupon_error == "Coupon not found"
        assert state.error is None

    def test_apply_remove_round_trip(self):
        state = run(loaded(), action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon(5.0, "cpn-001")))
        before = state.coupon_discount

        state = run(
            state,
            action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon(3.33, "cpn-002")),
            action(ActionType.REMOVE_COUPON_SUCCESS, coupon_id="cpn-002"),
        )
        assert state.coupon_discount == before
        assert [c.id for c in state.applied_coupons] == ["cpn-001"]

    def test_clear_coupon_error(self):
        state = run(
            loaded(),
            action(ActionType.APPLY_COUPON_FAILURE, error="Coupon has expired"),
            action(ActionType.CLEAR_COUPON_ERROR),
        )
        assert state.coupon_error is None


class TestSyncAndMisc:
    def test_sync_flags(self, make_item):
        state = run(loaded(), action(ActionType.SYNC, company_id="comp-001"))
        assert state.syncing
        assert not state.loading

        synced = run(state, action(ActionType.SYNC_SUCCESS, items=[make_item()]))
        assert not synced.syncing
        assert list(synced.items) == ["P1"]

        skipped = run(state, action(ActionType.SYNC_SKIPPED))
        assert not skipped.syncing
        assert skipped.items == {}

    def test_order_completed_empties_cart(self, make_item):
        state = run(
            loaded(items=[make_item()]),
            action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon()),
            action(ActionType.CLEAR),
            action(ActionType.ORDER_COMPLETED),
        )
        assert state.items == {}
        assert state.applied_coupons == []
        assert state.total_items == 0
        assert not state.loading
        assert state.error is None

    def test_sync_replaces_coupons(self, make_item):
        state = run(loaded(), action(ActionType.APPLY_COUPON_SUCCESS, coupon=coupon(2.0)))
        stored = coupon(5.0, "cpn-002")

        state = run(
            state,
            action(ActionType.SYNC, company_id="comp-001"),
            action(ActionType.SYNC_SUCCESS, items=[make_item()], applied_coupons=[stored], coupon_discount=5.0),
        )
        assert [c.id for c in state.applied_coupons] == ["cpn-002"]
        assert state.coupon_discount == 5.0

    def test_sidebar(self):
        state = run(CartState(), action(ActionType.TOGGLE_SIDEBAR))
        assert state.sidebar_open
        assert not run(state, action(ActionType.CLOSE_SIDEBAR)).sidebar_open

    def test_clear_error(self):
        state = run(loaded(), action(ActionType.CLEAR_FAILURE, error="boom"), action(ActionType.CLEAR_ERROR))
        assert state.error is None


class TestPurity:
    def test_same_action_same_result(self, make_item):
        state = loaded()
        add = action(ActionType.ADD_ITEM_SUCCESS, item=make_item())
        assert cart_reducer(state, add) == cart_reducer(state, add)

    def test_timestamps_come_from_action(self, make_item):
        at = datetime(2025, 3, 1, 9, 30)
        state = run(
            loaded(items=[make_item()]),
            action(ActionType.UPDATE_ITEM_SUCCESS, product_id="P1", quantity=4, at=at),
        )
        assert state.last_updated == at
        assert state.items["P1"].added_at == at

    def test_merge_keeps_new_line_timestamp(self, make_item):
        at = datetime(2025, 3, 1, 9, 30)
        state = run(
            loaded(items=[make_item()]),
            action(ActionType.ADD_ITEM_SUCCESS, item=make_item(added_at=at)),
        )
        assert state.items["P1"].added_at == at
