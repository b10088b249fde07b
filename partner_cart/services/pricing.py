"""
Quantity tier pricing

Resolves the unit price of a cart item from its company tier table and
stacks partner offer discounts on top. Offer stacking order is
partner price -> quantity tier -> offer discount -> individual discount.
"""

import math
from typing import Optional, Any

from pydantic import BaseModel

from ..models.cart import CartItem
from ..models.product import PriceTier, OfferType, DiscountType


def round2(value: float) -> float:
    """Round to 2 decimals with halves rounded up"""
    return math.floor(value * 100 + 0.5) / 100


class TierPrice(BaseModel):
    """Unit price picked from a tier table"""
    unit_price: float
    applied_tier: int


class TierHint(BaseModel):
    """Upsell nudge for an item close to a better tier"""
    product_id: str
    tier: int
    needed_quantity: int
    price: float
    savings: float

    @property
    def message(self) -> str:
        return (
            f"Add {self.needed_quantity} more to get {self.price:.2f} per unit "
            f"(save {self.savings:.2f})"
        )


def tier_table(source: Any) -> list[PriceTier]:
    """
    Build the tier table of a cart item or priced product.

    A source without a tier 1 price has no tier table. Tiers missing either
    their price or their quantity threshold are skipped.
    """
    if getattr(source, "price_tier_1", None) is None:
        return []

    tiers = []
    for number in (1, 2, 3):
        price = getattr(source, f"price_tier_{number}", None)
        quantity = getattr(source, f"quantity_tier_{number}", None)
        if number == 1 and not quantity:
            quantity = 1
        if price is None or not quantity:
            continue
        tiers.append(PriceTier(tier=number, quantity=quantity, price=price))
    return tiers


def resolve_tier_price(
    tiers: list[PriceTier],
    quantity: int,
    base_price: float,
) -> TierPrice:
    """
    Pick the unit price for a quantity.

    Returns the highest tier whose threshold is <= quantity, tier 1 when the
    quantity is below every threshold, and the base price when there is no
    tier table at all.
    """
    if not tiers:
        return TierPrice(unit_price=base_price, applied_tier=1)

    for tier in sorted(tiers, key=lambda t: t.tier, reverse=True):
        if quantity >= tier.quantity:
            return TierPrice(unit_price=tier.price, applied_tier=tier.tier)

    first = min(tiers, key=lambda t: t.tier)
    return TierPrice(unit_price=first.price, applied_tier=first.tier)


def next_tier_hint(
    item: CartItem,
    tier_2_window: int = 5,
    tier_3_window: int = 10,
) -> Optional[TierHint]:
    """Hint for an item that is a few units short of the next tier"""
    if item.price_tier_1 is None:
        return None

    if item.applied_tier == 1 and item.quantity_tier_2 and item.price_tier_2 is not None:
        tier, threshold, price, window = 2, item.quantity_tier_2, item.price_tier_2, tier_2_window
    elif item.applied_tier == 2 and item.quantity_tier_3 and item.price_tier_3 is not None:
        tier, threshold, price, window = 3, item.quantity_tier_3, item.price_tier_3, tier_3_window
    else:
        return None

    needed = threshold - item.quantity
    if needed <= 0 or needed > window:
        return None

    return TierHint(
        product_id=item.product_id,
        tier=tier,
        needed_quantity=needed,
        price=price,
        savings=round2((item.unit_price - price) * threshold),
    )


def apply_offer_discount(
    price: float,
    offer_type: Optional[OfferType],
    offer_discount: Optional[float],
    individual_discount: Optional[float] = None,
    individual_discount_type: Optional[DiscountType] = None,
) -> float:
    """Apply a partner offer, then an individual product discount, to a unit price"""
    if offer_type == OfferType.PERCENTAGE:
        price = price * (1 - (offer_discount or 0) / 100)
    elif offer_type == OfferType.FIXED_AMOUNT:
        price = max(0.0, price - (offer_discount or 0))

    if individual_discount:
        if individual_discount_type == DiscountType.PERCENTAGE:
            price = max(0.0, price * (1 - individual_discount / 100))
        elif individual_discount_type == DiscountType.FIXED_AMOUNT:
            price = max(0.0, price - individual_discount)

    return max(0.0, price)


def base_unit_price(item: CartItem) -> float:
    """Company price of an item before tiers and offers"""
    for price in (item.original_unit_price, item.company_price, item.retail_price):
        if price:
            return price
    return item.retail_price


def reprice_item(item: CartItem) -> CartItem:
    """Recompute unit price, totals, savings and applied tier for the item's quantity"""
    tiers = tier_table(item)
    base_price = base_unit_price(item)

    if tiers:
        tier_price = resolve_tier_price(tiers, item.quantity, base_price)
        unit_price = tier_price.unit_price
        applied_tier = tier_price.applied_tier
        if item.partner_offer_id:
            unit_price = apply_offer_discount(
                unit_price,
                item.partner_offer_type,
                item.partner_offer_discount,
                item.individual_discount,
                item.individual_discount_type,
            )
    else:
        unit_price = item.unit_price
        applied_tier = item.applied_tier

    savings_per_unit = item.retail_price - unit_price
    standard_savings_per_unit = max(0.0, item.retail_price - base_price)
    additional_per_unit = max(0.0, savings_per_unit - standard_savings_per_unit)

    return item.model_copy(
        update={
            "unit_price": unit_price,
            "applied_tier": applied_tier,
            "total_price": unit_price * item.quantity,
            "savings": savings_per_unit * item.quantity,
            "additional_savings": additional_per_unit * item.quantity,
        }
    )


def reprice_items(items: list[CartItem]) -> list[CartItem]:
    return [reprice_item(item) for item in items]


def merge_cart_item(existing: CartItem, new: CartItem) -> CartItem:
    """
    Merge a newly added line into the existing line for the same product.

    Quantities are summed, the lower unit price and the higher retail price
    win, and the pricing details of the cheaper line are kept.
    """
    source = new if new.unit_price <= existing.unit_price else existing
    merged = source.model_copy(
        update={
            "quantity": existing.quantity + new.quantity,
            "unit_price": min(existing.unit_price, new.unit_price),
            "retail_price": max(existing.retail_price, new.retail_price),
            "added_at": new.added_at,
        }
    )
    return reprice_item(merged)
