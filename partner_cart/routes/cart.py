"""Cart API routes"""

from fastapi import APIRouter, Depends

from ..models.cart import (
    AddToCartRequest,
    UpdateCartItemRequest,
    CartResponse,
    CartSummary,
)
from ..store.cart_store import CartStore, store_registry
from .dependencies import cart_response, get_cart_store, raise_for_result

router = APIRouter(prefix="/api/companies/{company_id}/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart(company_id: str):
    """Load the company cart from storage"""
    store = store_registry.get(company_id)
    await store.load(company_id)
    # A cart that cannot be read comes back empty with the error attached
    return cart_response(store)


@router.get("/summary", response_model=CartSummary)
async def get_cart_summary(store: CartStore = Depends(get_cart_store)):
    """Totals of the company cart"""
    return store.summary


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Add an item to the cart"""
    result = await store.add_item(request.product_id, request.quantity)
    raise_for_result(result)

    item = result.state.items[request.product_id]
    return cart_response(store, message=f"Added {request.quantity}x {item.name} to cart")


@router.post("/offers/{offer_id}", response_model=CartResponse)
async def add_offer_to_cart(
    offer_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """Add every product of a partner offer to the cart"""
    result = await store.add_offer(offer_id)
    raise_for_result(result)
    return cart_response(store, message="Offer added to cart")


@router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Update item quantity in cart"""
    result = await store.update_item(product_id, request.quantity)
    raise_for_result(result)
    return cart_response(store, message="Cart updated")


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_from_cart(
    product_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """Remove an item from the cart"""
    result = await store.remove_item(product_id)
    raise_for_result(result)
    return cart_response(store, message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Clear all items and coupons from cart"""
    result = await store.clear()
    raise_for_result(result)
    return cart_response(store, message="Cart cleared")


@router.post("/sync", response_model=CartResponse)
async def sync_cart(store: CartStore = Depends(get_cart_store)):
    """Re-read the cart from storage"""
    result = await store.sync()
    raise_for_result(result)
    return cart_response(store, message="Cart synced")
