# Database modules

from .products import product_db, ProductDatabase
from .companies import company_db, CompanyDatabase
from .coupons import coupon_db, CouponDatabase
from .carts import cart_db, CartDatabase
from .orders import order_db, OrderDatabase

__all__ = [
    "product_db",
    "ProductDatabase",
    "company_db",
    "CompanyDatabase",
    "coupon_db",
    "CouponDatabase",
    "cart_db",
    "CartDatabase",
    "order_db",
    "OrderDatabase",
]
