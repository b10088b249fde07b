"""Product API routes"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ..database.products import product_db
from ..models.product import Product, ProductCategory, ProductPricingResponse
from ..services.pricing import tier_table

router = APIRouter(prefix="/api/products", tags=["Products"])


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[ProductCategory] = Query(None, description="Filter by category"),
    in_stock_only: bool = Query(False, description="Only show in-stock items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
):
    """Search products in the catalog"""
    products, total = product_db.search_products(
        query=query,
        category=category,
        in_stock_only=in_stock_only,
        limit=limit,
        offset=offset,
    )
    return ProductSearchResponse(products=products, total=total, limit=limit, offset=offset)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{product_id}/pricing", response_model=ProductPricingResponse)
async def get_product_pricing(
    product_id: str,
    company_id: str = Query(..., description="Company whose price list applies"),
):
    """Quantity tiers and minimum order of a product for a company"""
    priced = product_db.get_priced_product(product_id, company_id)
    if not priced:
        raise HTTPException(status_code=404, detail="Product not found")

    return ProductPricingResponse(
        product=priced.product,
        company_id=company_id,
        base_price=priced.base_price,
        minimum_order=priced.minimum_order,
        tiers=tier_table(priced),
    )
