"""Cart storage for the partner cart"""

from datetime import datetime

from ..models.cart import CartItem, AppliedCoupon, StoredCart


class CartDatabase:
    """In-memory cart storage keyed by company ID"""

    def __init__(self):
        self.carts: dict[str, StoredCart] = {}

    def load(self, company_id: str) -> StoredCart:
        """Get a copy of the stored cart, empty if none was saved"""
        cart = self.carts.get(company_id)
        if not cart:
            return StoredCart(company_id=company_id)
        return cart.model_copy(deep=True)

    def save_items(self, company_id: str, items: list[CartItem]) -> None:
        cart = self.carts.setdefault(company_id, StoredCart(company_id=company_id))
        cart.items = [item.model_copy() for item in items]
        cart.updated_at = datetime.utcnow()

    def save_coupons(self, company_id: str, coupons: list[AppliedCoupon]) -> None:
        cart = self.carts.setdefault(company_id, StoredCart(company_id=company_id))
        cart.applied_coupons = [coupon.model_copy() for coupon in coupons]
        cart.updated_at = datetime.utcnow()

    def clear(self, company_id: str) -> None:
        """Remove all items and coupons of a company cart"""
        self.carts.pop(company_id, None)


# Singleton instance
cart_db = CartDatabase()
