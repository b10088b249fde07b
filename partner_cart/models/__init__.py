# Partner Cart Models

from .product import (
    Product,
    ProductCategory,
    CompanyPricing,
    PricedProduct,
    PartnerOffer,
    OfferProduct,
    OfferType,
    DiscountType,
    PriceTier,
    ProductPricingResponse,
)
from .coupon import Coupon, CouponType, CouponValidationResult, ApplyCouponRequest
from .cart import (
    CartItem,
    AppliedCoupon,
    CartSummary,
    CartState,
    StoredCart,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
)
from .checkout import (
    Order,
    OrderItem,
    OrderStatus,
    CheckoutRequest,
    CheckoutResponse,
    DeliveryDetails,
    ShippingMethod,
)

__all__ = [
    "Product",
    "ProductCategory",
    "CompanyPricing",
    "PricedProduct",
    "PartnerOffer",
    "OfferProduct",
    "OfferType",
    "DiscountType",
    "PriceTier",
    "ProductPricingResponse",
    "Coupon",
    "CouponType",
    "CouponValidationResult",
    "ApplyCouponRequest",
    "CartItem",
    "AppliedCoupon",
    "CartSummary",
    "CartState",
    "StoredCart",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "Order",
    "OrderItem",
    "OrderStatus",
    "CheckoutRequest",
    "CheckoutResponse",
    "DeliveryDetails",
    "ShippingMethod",
]
