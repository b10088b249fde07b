"""Checkout models for the partner cart"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SCHEDULED = "scheduled"


class DeliveryDetails(BaseModel):
    """Delivery details for a B2B order"""
    contact_name: str
    address: str
    city: str
    postal_code: str
    country: str = "HR"
    phone: Optional[str] = None
    instructions: Optional[str] = None
    purchase_order_number: Optional[str] = None
    shipping_method: ShippingMethod = ShippingMethod.STANDARD


class CheckoutRequest(BaseModel):
    """Request to place an order from the company cart"""
    delivery: DeliveryDetails


class OrderItem(BaseModel):
    """Item in an order"""
    product_id: str
    product_name: str
    sku: str
    quantity: int
    unit_price: float
    total_price: float


class Order(BaseModel):
    """Placed order"""
    order_id: str
    company_id: str
    status: OrderStatus
    items: list[OrderItem]
    subtotal: float
    coupon_codes: list[str] = []
    coupon_discount: float = 0.0
    tax: float
    shipping: float
    total: float
    currency: str = "EUR"
    delivery: DeliveryDetails
    created_at: datetime
    updated_at: datetime


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order: Optional[Order] = None
    error_message: Optional[str] = None
