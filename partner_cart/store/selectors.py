"""Derived views of a cart state"""

from typing import Optional

from ..core.config import Settings
from ..models.cart import AppliedCoupon, CartItem, CartState, CartSummary
from ..services.pricing import next_tier_hint
from ..services.totals import build_summary


def select_summary(state: CartState, settings: Optional[Settings] = None) -> CartSummary:
    return build_summary(state, settings)


def select_is_empty(state: CartState) -> bool:
    return not state.items


def select_item(state: CartState, product_id: str) -> Optional[CartItem]:
    return state.items.get(product_id)


def select_item_quantity(state: CartState, product_id: str) -> int:
    item = state.items.get(product_id)
    return item.quantity if item else 0


def select_is_product_in_cart(state: CartState, product_id: str) -> bool:
    return product_id in state.items


def select_items_by_category(state: CartState) -> dict[str, list[CartItem]]:
    categories: dict[str, list[CartItem]] = {}
    for item in state.item_list:
        categories.setdefault(item.category, []).append(item)
    return categories


def select_savings_breakdown(state: CartState) -> list[dict]:
    """Per-item savings against retail price"""
    breakdown = []
    for item in state.item_list:
        unit_savings = item.retail_price - item.unit_price
        percentage = round(unit_savings / item.retail_price * 100) if item.retail_price else 0
        breakdown.append({
            "product_id": item.product_id,
            "name": item.name,
            "quantity": item.quantity,
            "unit_savings": unit_savings,
            "total_savings": unit_savings * item.quantity,
            "savings_percentage": percentage,
        })
    return breakdown


def select_product_pricing(state: CartState, product_id: str) -> Optional[dict]:
    item = state.items.get(product_id)
    if not item:
        return None

    return {
        "unit_price": item.unit_price,
        "retail_price": item.retail_price,
        "company_price": item.company_price,
        "partner_price": item.partner_price,
        "savings": item.savings,
        "applied_tier": item.applied_tier,
        "has_company_price": item.company_price is not None,
        "has_partner_price": item.partner_price is not None,
    }


def select_tier_hints(state: CartState, settings: Settings) -> dict[str, str]:
    """Upsell messages keyed by product ID, for items close to a better tier"""
    hints = {}
    for item in state.item_list:
        hint = next_tier_hint(item, settings.tier_2_hint_window, settings.tier_3_hint_window)
        if hint:
            hints[item.product_id] = hint.message
    return hints


def select_has_coupons(state: CartState) -> bool:
    return bool(state.applied_coupons)


def select_coupon(state: CartState, coupon_id: str) -> Optional[AppliedCoupon]:
    return next((c for c in state.applied_coupons if c.id == coupon_id), None)


def select_company_info(state: CartState) -> dict:
    return {"company_id": state.company_id, "company_name": state.company_name}


def select_has_company(state: CartState) -> bool:
    return bool(state.company_id)
