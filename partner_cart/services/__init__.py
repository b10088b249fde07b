# Services

from .pricing import (
    round2,
    tier_table,
    resolve_tier_price,
    next_tier_hint,
    apply_offer_discount,
    reprice_item,
    reprice_items,
    merge_cart_item,
    TierPrice,
    TierHint,
)
from .totals import calculate_cart_totals, build_summary, CartTotals
from .coupons import calculate_discount, validate_coupon
from .cart_service import CartService, LoadedCart

__all__ = [
    "round2",
    "tier_table",
    "resolve_tier_price",
    "next_tier_hint",
    "apply_offer_discount",
    "reprice_item",
    "reprice_items",
    "merge_cart_item",
    "TierPrice",
    "TierHint",
    "calculate_cart_totals",
    "build_summary",
    "CartTotals",
    "calculate_discount",
    "validate_coupon",
    "CartService",
    "LoadedCart",
]
