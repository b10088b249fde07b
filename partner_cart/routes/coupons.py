"""Coupon API routes"""

from fastapi import APIRouter, Depends

from ..models.cart import CartResponse
from ..models.coupon import ApplyCouponRequest, Coupon
from ..store.cart_store import CartStore
from .dependencies import cart_response, get_cart_store, raise_for_result

router = APIRouter(prefix="/api/companies/{company_id}/cart/coupons", tags=["Coupons"])


@router.get("/available", response_model=list[Coupon])
async def list_available_coupons(store: CartStore = Depends(get_cart_store)):
    """Coupons that could apply to the current cart"""
    return await store.service.available_coupons(store.state.item_list)


@router.post("", response_model=CartResponse)
async def apply_coupon(
    request: ApplyCouponRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Apply a coupon code to the cart"""
    result = await store.apply_coupon(request.code)
    raise_for_result(result)

    coupon = result.state.applied_coupons[-1]
    return cart_response(store, message=f"Coupon {coupon.code} applied")


@router.delete("/{coupon_id}", response_model=CartResponse)
async def remove_coupon(
    coupon_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """Remove an applied coupon"""
    result = await store.remove_coupon(coupon_id)
    raise_for_result(result)
    return cart_response(store, message="Coupon removed")
