"""
Coupon evaluation

Checks a catalog coupon against the cart and computes the discount it
grants. The discount is computed once, when the coupon is applied, and is
stored on the AppliedCoupon from then on.
"""

from datetime import datetime
from typing import Optional

from ..models.cart import AppliedCoupon, CartItem
from ..models.coupon import Coupon, CouponType, CouponValidationResult
from .pricing import round2


def calculate_discount(
    coupon_type: CouponType,
    value: float,
    subtotal: float,
    max_discount: Optional[float] = None,
    cap_fixed_amount: bool = True,
) -> float:
    """
    Discount granted by a coupon on a pre-coupon subtotal.

    Free shipping coupons grant nothing against the product subtotal.
    """
    if coupon_type == CouponType.PERCENTAGE:
        discount = subtotal * (value / 100)
    elif coupon_type == CouponType.FIXED_AMOUNT:
        discount = min(value, subtotal) if cap_fixed_amount else value
    else:
        discount = 0.0

    if max_discount and discount > max_discount:
        discount = max_discount

    return max(0.0, round2(discount))


def add_coupon_discount(current: float, discount_amount: float) -> float:
    return round2(current + discount_amount)


def remove_coupon_discount(current: float, discount_amount: float) -> float:
    return max(0.0, round2(current - discount_amount))


def items_total(items: list[CartItem]) -> float:
    return sum(item.unit_price * item.quantity for item in items)


def eligible_items(coupon: Coupon, items: list[CartItem]) -> list[CartItem]:
    """Items the coupon's product, category and offer restrictions allow"""
    eligible = []
    for item in items:
        if coupon.applicable_product_ids and item.product_id not in coupon.applicable_product_ids:
            continue
        if coupon.excluded_product_ids and item.product_id in coupon.excluded_product_ids:
            continue
        if coupon.applicable_categories and item.category not in coupon.applicable_categories:
            continue
        if coupon.excluded_categories and item.category in coupon.excluded_categories:
            continue
        if coupon.applicable_offer_ids and item.partner_offer_id not in coupon.applicable_offer_ids:
            continue
        if (
            coupon.excluded_offer_ids
            and item.partner_offer_id
            and item.partner_offer_id in coupon.excluded_offer_ids
        ):
            continue
        eligible.append(item)
    return eligible


def _invalid(coupon: Coupon, message: str) -> CouponValidationResult:
    return CouponValidationResult(is_valid=False, coupon=coupon, error_message=message)


def validate_coupon(
    coupon: Coupon,
    items: list[CartItem],
    now: Optional[datetime] = None,
    cap_fixed_amount: bool = True,
) -> CouponValidationResult:
    """
    Check a coupon against the cart items.

    Rules are checked in order: active flag, validity window, usage limit,
    order amount limits, then product, category and offer restrictions.
    The first failing rule decides the error message.
    """
    now = now or datetime.utcnow()

    if not coupon.is_active:
        return _invalid(coupon, "Coupon is not active")

    if coupon.start_date > now:
        return _invalid(coupon, "Coupon is not valid yet")

    if coupon.end_date and coupon.end_date < now:
        return _invalid(coupon, "Coupon has expired")

    if coupon.max_usage and coupon.current_usage >= coupon.max_usage:
        return _invalid(coupon, "Coupon usage limit reached")

    cart_total = items_total(items)

    if coupon.min_order_amount and cart_total < coupon.min_order_amount:
        return _invalid(
            coupon, f"Minimum order amount of {coupon.min_order_amount:.2f} not reached"
        )

    if coupon.max_order_amount and cart_total > coupon.max_order_amount:
        return _invalid(
            coupon, f"Maximum order amount of {coupon.max_order_amount:.2f} exceeded"
        )

    cart_offer_ids = {item.partner_offer_id for item in items if item.partner_offer_id}

    if coupon.applicable_offer_ids and not cart_offer_ids.intersection(coupon.applicable_offer_ids):
        return _invalid(coupon, "Coupon does not apply to the offers in your cart")

    if coupon.excluded_offer_ids and cart_offer_ids.intersection(coupon.excluded_offer_ids):
        return _invalid(coupon, "Coupon cannot be combined with offers in your cart")

    product_ids = {item.product_id for item in items}
    categories = {item.category for item in items}

    if coupon.applicable_product_ids and not product_ids.intersection(coupon.applicable_product_ids):
        return _invalid(coupon, "Coupon does not apply to the products in your cart")

    if coupon.excluded_product_ids and product_ids.intersection(coupon.excluded_product_ids):
        return _invalid(coupon, "Coupon cannot be used with some products in your cart")

    if coupon.applicable_categories and not categories.intersection(coupon.applicable_categories):
        return _invalid(coupon, "Coupon does not apply to the categories in your cart")

    if coupon.excluded_categories and categories.intersection(coupon.excluded_categories):
        return _invalid(coupon, "Coupon cannot be used with some categories in your cart")

    discount = calculate_discount(
        coupon.discount_type,
        coupon.discount_value,
        items_total(eligible_items(coupon, items)),
        max_discount=coupon.max_discount_amount,
        cap_fixed_amount=cap_fixed_amount,
    )
    return CouponValidationResult(is_valid=True, coupon=coupon, discount_amount=discount)


def is_potentially_applicable(coupon: Coupon, items: list[CartItem]) -> bool:
    """Quick pre-check used when listing coupons for a cart"""
    if coupon.min_order_amount and items_total(items) < coupon.min_order_amount:
        return False

    if coupon.applicable_product_ids and not any(
        item.product_id in coupon.applicable_product_ids for item in items
    ):
        return False

    if coupon.applicable_categories and not any(
        item.category in coupon.applicable_categories for item in items
    ):
        return False

    return True


def to_applied_coupon(
    coupon: Coupon,
    discount_amount: float,
    applied_at: Optional[datetime] = None,
) -> AppliedCoupon:
    return AppliedCoupon(
        id=coupon.id,
        code=coupon.code,
        type=coupon.discount_type,
        value=coupon.discount_value,
        discount_amount=discount_amount,
        applied_at=applied_at or datetime.utcnow(),
        title=coupon.title,
        description=coupon.description,
    )
