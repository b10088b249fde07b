"""Tests for cart totals and the summary."""

import pytest

from partner_cart.core.config import Settings
from partner_cart.models.cart import AppliedCoupon, CartState
from partner_cart.models.coupon import CouponType
from partner_cart.services.totals import build_summary, calculate_cart_totals, estimate_shipping


class TestCalculateCartTotals:
    def test_sums_lines(self, make_item):
        totals = calculate_cart_totals([make_item(quantity=2), make_item("P2", quantity=1, unit_price=5.5, retail_price=6.0)])
        assert totals.total_items == 3
        assert totals.subtotal == 25.5
        assert totals.total_savings == 10.5

    def test_rounds_the_sum_not_each_line(self, make_item):
        items = [make_item(f"P{i}", unit_price=0.333, retail_price=0.5) for i in range(3)]
        assert calculate_cart_totals(items).subtotal == 1.0

    def test_empty_cart(self):
        totals = calculate_cart_totals([])
        assert totals.total_items == 0
        assert totals.subtotal == 0.0
        assert totals.total_savings == 0.0


class TestEstimateShipping:
    @pytest.mark.parametrize("subtotal,shipping", [(0.0, 50.0), (1000.0, 50.0), (1000.01, 0.0), (5000.0, 0.0)])
    def test_free_above_threshold(self, settings, subtotal, shipping):
        assert estimate_shipping(subtotal, settings) == shipping


class TestBuildSummary:
    def _state(self, **fields):
        defaults = dict(total_items=2, subtotal=200.0, total_savings=30.0, coupon_discount=20.0)
        defaults.update(fields)
        return CartState(**defaults)

    def test_total_excludes_coupon_discount_by_default(self, settings):
        summary = build_summary(self._state(), settings)
        assert summary.item_count == 2
        assert summary.estimated_tax == 50.0
        assert summary.estimated_shipping == 50.0
        assert summary.coupon_discount == 20.0
        assert summary.total == 300.0

    def test_total_subtracts_coupon_discount_when_enabled(self):
        settings = Settings(sync_enabled=False, subtract_coupon_discount=True)
        assert build_summary(self._state(), settings).total == 280.0

    def test_subtracted_total_never_negative(self):
        settings = Settings(sync_enabled=False, subtract_coupon_discount=True)
        summary = build_summary(self._state(subtotal=10.0, coupon_discount=500.0), settings)
        assert summary.total == 0.0

    def test_free_shipping_coupon(self, settings):
        coupon = AppliedCoupon(id="cpn-003", code="FREESHIP", type=CouponType.FREE_SHIPPING, value=0.0)
        state = self._state(applied_coupons=[coupon], coupon_discount=0.0)

        assert build_summary(state, settings).estimated_shipping == 50.0

        enabled = Settings(sync_enabled=False, free_shipping_coupons_apply=True)
        summary = build_summary(state, enabled)
        assert summary.estimated_shipping == 0.0
        assert summary.total == 250.0

    def test_empty_cart_still_charges_flat_shipping(self, settings):
        summary = build_summary(CartState(), settings)
        assert summary.estimated_tax == 0.0
        assert summary.estimated_shipping == 50.0
        assert summary.total == 50.0
