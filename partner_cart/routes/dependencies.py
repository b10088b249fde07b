"""Shared helpers for cart routes"""

from typing import Optional

from fastapi import HTTPException

from ..core.errors import ErrorKind
from ..models.cart import CartResponse
from ..store.cart_store import CartOperationResult, CartStore, store_registry
from ..store.selectors import select_tier_hints

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.BACKEND: 502,
}


async def get_cart_store(company_id: str) -> CartStore:
    """Cart store of a company, loaded on first use"""
    store = store_registry.get(company_id)
    if store.state.company_id != company_id:
        await store.load(company_id)
    return store


def raise_for_result(result: CartOperationResult) -> None:
    """Turn a failed store operation into an HTTP error"""
    if result.success:
        return
    status_code = ERROR_STATUS.get(result.error_kind, 500)
    raise HTTPException(status_code=status_code, detail=result.error_message)


def cart_response(store: CartStore, message: Optional[str] = None) -> CartResponse:
    return CartResponse(
        cart=store.state,
        summary=store.summary,
        tier_hints=select_tier_hints(store.state, store.settings),
        message=message,
    )
