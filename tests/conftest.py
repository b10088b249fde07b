"""Shared fixtures for partner cart tests."""

import os

import pytest

# Background sync tasks are started explicitly in the tests that need them
os.environ.setdefault("PARTNER_CART_SYNC_ENABLED", "false")

from partner_cart.core.config import Settings
from partner_cart.database import (
    cart_db,
    coupon_db,
    order_db,
    product_db,
    CartDatabase,
    CompanyDatabase,
    CouponDatabase,
    ProductDatabase,
)
from partner_cart.models.cart import CartItem
from partner_cart.services.cart_service import CartService
from partner_cart.store.cart_store import store_registry


@pytest.fixture(autouse=True)
def reset_databases():
    """Reset the in-memory singletons around every test."""
    product_db.reset()
    coupon_db.reset()
    cart_db.carts.clear()
    order_db.orders.clear()
    store_registry.stores.clear()
    yield
    cart_db.carts.clear()
    order_db.orders.clear()
    store_registry.stores.clear()


@pytest.fixture
def settings():
    return Settings(sync_enabled=False)


@pytest.fixture
def service(settings):
    """Cart service over fresh, unshared databases."""
    return CartService(
        carts=CartDatabase(),
        products=ProductDatabase(),
        companies=CompanyDatabase(),
        coupons=CouponDatabase(),
        settings=settings,
    )


@pytest.fixture
def make_item():
    """Factory for cart items without tier pricing unless given."""

    def _make(product_id="P1", quantity=1, unit_price=10.0, retail_price=15.0, **fields):
        return CartItem(
            product_id=product_id,
            sku=f"SKU-{product_id}",
            name=f"Product {product_id}",
            quantity=quantity,
            unit_price=unit_price,
            retail_price=retail_price,
            total_price=unit_price * quantity,
            **fields,
        )

    return _make


@pytest.fixture
def tiered_item(make_item):
    """Factory for items priced 100/90/80 at 1/10/50 units."""

    def _make(quantity=1, **fields):
        defaults = dict(
            unit_price=100.0,
            retail_price=120.0,
            price_tier_1=100.0,
            quantity_tier_1=1,
            price_tier_2=90.0,
            quantity_tier_2=10,
            price_tier_3=80.0,
            quantity_tier_3=50,
            original_unit_price=100.0,
            company_price=100.0,
        )
        defaults.update(fields)
        return make_item(product_id="T1", quantity=quantity, **defaults)

    return _make
