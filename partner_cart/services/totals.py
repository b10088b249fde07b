"""Cart totals and summary"""

from typing import Optional

from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..models.cart import CartItem, CartState, CartSummary
from ..models.coupon import CouponType
from .pricing import round2


class CartTotals(BaseModel):
    total_items: int = 0
    subtotal: float = 0.0
    total_savings: float = 0.0


def calculate_cart_totals(items: list[CartItem]) -> CartTotals:
    """
    Sum quantities, prices and savings over the cart items.

    Rounding is applied once to each sum, never per line.
    """
    total_items = sum(item.quantity for item in items)
    subtotal = sum(item.unit_price * item.quantity for item in items)
    total_savings = sum(
        (item.retail_price - item.unit_price) * item.quantity for item in items
    )

    return CartTotals(
        total_items=total_items,
        subtotal=round2(subtotal),
        total_savings=round2(total_savings),
    )


def estimate_shipping(subtotal: float, settings: Settings) -> float:
    if subtotal > settings.free_shipping_threshold:
        return 0.0
    return settings.flat_shipping_rate


def build_summary(state: CartState, settings: Optional[Settings] = None) -> CartSummary:
    """Assemble the displayed totals for a cart state"""
    settings = settings or get_settings()

    estimated_tax = round2(state.subtotal * settings.vat_rate)
    estimated_shipping = estimate_shipping(state.subtotal, settings)

    if settings.free_shipping_coupons_apply and any(
        coupon.type == CouponType.FREE_SHIPPING for coupon in state.applied_coupons
    ):
        estimated_shipping = 0.0

    total = state.subtotal + estimated_tax + estimated_shipping
    if settings.subtract_coupon_discount:
        total = max(0.0, total - state.coupon_discount)

    return CartSummary(
        item_count=state.total_items,
        subtotal=state.subtotal,
        total_savings=state.total_savings,
        coupon_discount=state.coupon_discount,
        estimated_tax=estimated_tax,
        estimated_shipping=estimated_shipping,
        total=round2(total),
    )
