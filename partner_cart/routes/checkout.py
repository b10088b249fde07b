"""Checkout API routes"""

import logging

from fastapi import APIRouter, HTTPException, Depends

from ..database.orders import order_db
from ..database.products import product_db
from ..models.checkout import CheckoutRequest, CheckoutResponse, Order
from ..store.cart_store import CartStore
from .dependencies import get_cart_store, raise_for_result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies/{company_id}/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutResponse)
async def checkout(
    company_id: str,
    request: CheckoutRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Place an order from the company cart and reset the cart"""
    cart = store.state
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    for item in cart.item_list:
        product = product_db.get_product(item.product_id)
        if not product or product.stock_quantity < item.quantity:
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for {item.name}",
            )

    for item in cart.item_list:
        product_db.update_stock(item.product_id, -item.quantity)

    order = order_db.create_order(
        cart=cart,
        summary=store.summary,
        delivery=request.delivery,
        currency=store.settings.currency,
    )

    result = await store.complete_order()
    if not result.success:
        # Cart still holds the items, so undo the order and its stock changes
        order_db.delete_order(order.order_id)
        for item in cart.item_list:
            product_db.update_stock(item.product_id, item.quantity)
        logger.warning(f"Order {order.order_id} rolled back for {company_id}: {result.error_message}")
        raise_for_result(result)

    logger.info(f"Order {order.order_id} created for {company_id}: {order.total:.2f} {order.currency}")

    return CheckoutResponse(success=True, order=order)


@router.get("/orders", response_model=list[Order])
async def list_orders(company_id: str, limit: int = 50):
    """List recent orders of the company"""
    return order_db.list_orders(company_id, limit=limit)


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(company_id: str, order_id: str):
    """Get order details"""
    order = order_db.get_order(order_id)
    if not order or order.company_id != company_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
