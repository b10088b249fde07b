"""Coupon models"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class CouponType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class Coupon(BaseModel):
    """Coupon definition in the catalog"""
    id: str
    code: str
    title: str
    description: Optional[str] = None
    discount_type: CouponType
    discount_value: float = Field(ge=0)
    max_discount_amount: Optional[float] = None
    min_order_amount: Optional[float] = None
    max_order_amount: Optional[float] = None
    applicable_product_ids: list[str] = []
    excluded_product_ids: list[str] = []
    applicable_categories: list[str] = []
    excluded_categories: list[str] = []
    applicable_offer_ids: list[str] = []
    excluded_offer_ids: list[str] = []
    max_usage: Optional[int] = None
    current_usage: int = 0
    start_date: datetime
    end_date: Optional[datetime] = None
    is_active: bool = True
    featured: bool = False


class CouponValidationResult(BaseModel):
    """Outcome of checking a coupon against a cart"""
    is_valid: bool
    coupon: Optional[Coupon] = None
    discount_amount: float = 0.0
    error_message: Optional[str] = None


class ApplyCouponRequest(BaseModel):
    """Request to apply a coupon code"""
    code: str
