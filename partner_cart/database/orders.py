"""Order storage for the partner cart"""

import uuid
from datetime import datetime
from typing import Optional

from ..models.cart import CartState, CartSummary
from ..models.checkout import Order, OrderItem, OrderStatus, DeliveryDetails


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self):
        self.orders: dict[str, Order] = {}

    def create_order(
        self,
        cart: CartState,
        summary: CartSummary,
        delivery: DeliveryDetails,
        currency: str = "EUR",
    ) -> Order:
        """Create an order from a company cart"""
        now = datetime.utcnow()

        order_items = [
            OrderItem(
                product_id=item.product_id,
                product_name=item.name,
                sku=item.sku,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in cart.item_list
        ]

        order = Order(
            order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            company_id=cart.company_id,
            status=OrderStatus.PENDING,
            items=order_items,
            subtotal=summary.subtotal,
            coupon_codes=[coupon.code for coupon in cart.applied_coupons],
            coupon_discount=summary.coupon_discount,
            tax=summary.estimated_tax,
            shipping=summary.estimated_shipping,
            total=summary.total,
            currency=currency,
            delivery=delivery,
            created_at=now,
            updated_at=now,
        )

        self.orders[order.order_id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def delete_order(self, order_id: str) -> bool:
        """Drop an order that could not be completed"""
        return self.orders.pop(order_id, None) is not None

    def list_orders(self, company_id: str, limit: int = 50) -> list[Order]:
        """List recent orders of a company"""
        orders = [o for o in self.orders.values() if o.company_id == company_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders[:limit]


# Singleton instance
order_db = OrderDatabase()
