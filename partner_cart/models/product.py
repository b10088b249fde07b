"""Product, company pricing and partner offer models"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class ProductCategory(str, Enum):
    PANELS = "panels"
    INVERTERS = "inverters"
    BATTERIES = "batteries"
    MOUNTING = "mounting"
    CABLES = "cables"
    ACCESSORIES = "accessories"


class OfferType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    TIER_BASED = "tier_based"
    BUNDLE = "bundle"
    BUY_X_GET_Y = "buy_x_get_y"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    name: str
    description: str = ""
    price: float = Field(gt=0)
    category: ProductCategory
    sku: str
    image_url: Optional[str] = None
    is_active: bool = True
    stock_quantity: int = Field(ge=0, default=100)

    class Config:
        from_attributes = True

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0


class CompanyPricing(BaseModel):
    """Company-specific price list entry with up to three quantity tiers"""
    company_id: str
    product_id: str
    price_tier_1: Optional[float] = None
    quantity_tier_1: int = 1
    price_tier_2: Optional[float] = None
    quantity_tier_2: Optional[int] = None
    price_tier_3: Optional[float] = None
    quantity_tier_3: Optional[int] = None
    minimum_order: int = Field(default=1, ge=1)


class PricedProduct(BaseModel):
    """Product joined with the pricing that applies to one company"""
    product: Product
    company_price: Optional[float] = None
    partner_price: Optional[float] = None
    minimum_order: int = 1
    price_tier_1: Optional[float] = None
    quantity_tier_1: Optional[int] = 1
    price_tier_2: Optional[float] = None
    quantity_tier_2: Optional[int] = None
    price_tier_3: Optional[float] = None
    quantity_tier_3: Optional[int] = None

    @property
    def has_partner_pricing(self) -> bool:
        return self.price_tier_1 is not None

    @property
    def base_price(self) -> float:
        """Company price, falling back to partner then retail price"""
        for price in (self.company_price, self.partner_price, self.product.price):
            if price is not None:
                return price
        return self.product.price


class OfferProduct(BaseModel):
    """Product included in a partner offer"""
    product_id: str
    quantity: int = Field(default=1, gt=0)
    individual_discount: Optional[float] = None
    individual_discount_type: Optional[DiscountType] = None


class PartnerOffer(BaseModel):
    """Promotional campaign for B2B customers, stacked on tier pricing"""
    id: str
    title: str
    description: str = ""
    offer_type: OfferType
    discount_value: float = 0.0
    valid_until: Optional[datetime] = None
    is_active: bool = True
    products: list[OfferProduct] = []


class PriceTier(BaseModel):
    """One row of a quantity tier table"""
    tier: int
    quantity: int
    price: float


class ProductPricingResponse(BaseModel):
    """Pricing view of a product for a company"""
    product: Product
    company_id: str
    base_price: float
    minimum_order: int
    tiers: list[PriceTier] = []
