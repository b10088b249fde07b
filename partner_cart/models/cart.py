"""Cart models for the partner cart"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .coupon import CouponType
from .product import OfferType, DiscountType


class CartItem(BaseModel):
    """Line item in a company cart, priced for that company"""
    product_id: str
    sku: str
    name: str = ""
    category: str = "general"
    image_url: Optional[str] = None
    quantity: int = Field(ge=1)
    # B2B price actually charged (company, tier or offer price)
    unit_price: float
    # Retail price for comparison
    retail_price: float
    total_price: float = 0.0
    minimum_order: int = 1
    company_price: Optional[float] = None
    partner_price: Optional[float] = None
    savings: float = 0.0
    additional_savings: float = 0.0
    in_stock: bool = True
    added_at: datetime = Field(default_factory=datetime.utcnow)

    # Quantity tiers
    price_tier_1: Optional[float] = None
    quantity_tier_1: Optional[int] = None
    price_tier_2: Optional[float] = None
    quantity_tier_2: Optional[int] = None
    price_tier_3: Optional[float] = None
    quantity_tier_3: Optional[int] = None
    original_unit_price: Optional[float] = None
    applied_tier: int = Field(default=1, ge=1, le=3)

    # Partner offer the item was added through
    partner_offer_id: Optional[str] = None
    partner_offer_name: Optional[str] = None
    partner_offer_type: Optional[OfferType] = None
    partner_offer_discount: Optional[float] = None
    partner_offer_original_price: Optional[float] = None
    partner_offer_valid_until: Optional[datetime] = None
    partner_offer_applied_at: Optional[datetime] = None
    individual_discount: Optional[float] = None
    individual_discount_type: Optional[DiscountType] = None


class AppliedCoupon(BaseModel):
    """Coupon applied to a cart, with its discount frozen at apply time"""
    id: str
    code: str
    type: CouponType
    value: float
    discount_amount: float = 0.0
    applied_at: datetime = Field(default_factory=datetime.utcnow)
    title: Optional[str] = None
    description: Optional[str] = None


class CartSummary(BaseModel):
    """Derived cart totals"""
    item_count: int = 0
    subtotal: float = 0.0
    total_savings: float = 0.0
    coupon_discount: float = 0.0
    estimated_tax: float = 0.0
    estimated_shipping: float = 0.0
    total: float = 0.0


class CartState(BaseModel):
    """Cart of one company context"""
    items: dict[str, CartItem] = {}
    applied_coupons: list[AppliedCoupon] = []
    total_items: int = 0
    subtotal: float = 0.0
    total_savings: float = 0.0
    coupon_discount: float = 0.0
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    loading: bool = False
    is_coupon_loading: bool = False
    syncing: bool = False
    error: Optional[str] = None
    coupon_error: Optional[str] = None
    sidebar_open: bool = False
    last_updated: Optional[datetime] = None
    # Bumped on every change to items or coupons
    revision: int = 0

    @property
    def item_list(self) -> list[CartItem]:
        return list(self.items.values())


class StoredCart(BaseModel):
    """Cart record held by the persistence layer"""
    company_id: str
    items: list[CartItem] = []
    applied_coupons: list[AppliedCoupon] = []
    updated_at: Optional[datetime] = None


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity (0 removes the item)"""
    quantity: int = Field(ge=0)


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartState
    summary: CartSummary
    tier_hints: dict[str, str] = {}
    message: Optional[str] = None
