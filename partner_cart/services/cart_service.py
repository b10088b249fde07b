"""
Cart Service

Business operations on a company cart over the product, company, coupon
and cart stores. Every operation raises a CartError subclass on failure;
turning failures into outcomes is left to the caller.
"""

import logging
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..core.config import Settings, get_settings
from ..core.errors import BackendError, CartValidationError, NotFoundError
from ..database import (
    cart_db,
    company_db,
    coupon_db,
    product_db,
    CartDatabase,
    CompanyDatabase,
    CouponDatabase,
    ProductDatabase,
)
from ..models.cart import AppliedCoupon, CartItem, StoredCart
from ..models.coupon import Coupon
from ..models.product import OfferProduct, PartnerOffer, PricedProduct
from .coupons import is_potentially_applicable, to_applied_coupon, validate_coupon
from .pricing import (
    apply_offer_discount,
    merge_cart_item,
    reprice_item,
    reprice_items,
    resolve_tier_price,
    round2,
    tier_table,
)

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"


class LoadedCart(BaseModel):
    """Cart contents as read back from storage"""
    items: list[CartItem] = []
    company_name: str = UNKNOWN_COMPANY
    applied_coupons: list[AppliedCoupon] = []
    coupon_discount: float = 0.0


class CartService:
    """Company cart operations"""

    def __init__(
        self,
        carts: CartDatabase = cart_db,
        products: ProductDatabase = product_db,
        companies: CompanyDatabase = company_db,
        coupons: CouponDatabase = coupon_db,
        settings: Optional[Settings] = None,
    ):
        self.carts = carts
        self.products = products
        self.companies = companies
        self.coupons = coupons
        self.settings = settings or get_settings()

    # Storage access

    def _load_stored(self, company_id: str) -> StoredCart:
        try:
            return self.carts.load(company_id)
        except Exception as e:
            raise BackendError(f"Failed to load cart: {e}") from e

    def _save_items(self, company_id: str, items: list[CartItem]) -> None:
        try:
            self.carts.save_items(company_id, items)
        except Exception as e:
            raise BackendError(f"Failed to save cart: {e}") from e

    def _save_coupons(self, company_id: str, coupons: list[AppliedCoupon]) -> None:
        try:
            self.carts.save_coupons(company_id, coupons)
        except Exception as e:
            raise BackendError(f"Failed to save coupons: {e}") from e

    # Cart operations

    async def load_cart(self, company_id: str) -> LoadedCart:
        """Load a company cart with tier pricing reapplied"""
        stored = self._load_stored(company_id)
        items = reprice_items(stored.items)
        coupon_discount = round2(sum(c.discount_amount for c in stored.applied_coupons))

        return LoadedCart(
            items=items,
            company_name=self.companies.get_company_name(company_id) or UNKNOWN_COMPANY,
            applied_coupons=stored.applied_coupons,
            coupon_discount=coupon_discount,
        )

    async def add_to_cart(
        self,
        company_id: str,
        product_id: str,
        quantity: int,
        offer: Optional[PartnerOffer] = None,
        offer_product: Optional[OfferProduct] = None,
    ) -> CartItem:
        """
        Add a product to the company cart.

        Returns the line as priced for this addition. The stored cart holds
        it merged with any existing line for the same product.
        """
        stored = self._load_stored(company_id)
        items = {item.product_id: item for item in stored.items}

        new_item = self._merge_line(items, company_id, product_id, quantity, offer, offer_product)
        self._save_items(company_id, reprice_items(list(items.values())))

        logger.info(
            f"Added {quantity}x {product_id} to cart of {company_id} "
            f"at {new_item.unit_price:.2f} (tier {new_item.applied_tier})"
        )
        return new_item

    async def add_offer_to_cart(self, company_id: str, offer_id: str) -> list[CartItem]:
        """
        Add every product of a partner offer to the cart.

        All lines are priced and checked before the cart is saved, so either
        every product of the offer is added or none is.
        """
        offer = self.products.get_offer(offer_id)
        if not offer:
            raise NotFoundError("Offer not found")

        if offer.valid_until and offer.valid_until < datetime.utcnow():
            raise CartValidationError("Offer has expired")

        stored = self._load_stored(company_id)
        items = {item.product_id: item for item in stored.items}

        added = [
            self._merge_line(
                items,
                company_id,
                offer_product.product_id,
                offer_product.quantity,
                offer=offer,
                offer_product=offer_product,
            )
            for offer_product in offer.products
        ]
        self._save_items(company_id, reprice_items(list(items.values())))

        logger.info(f"Added offer {offer_id} ({len(added)} products) to cart of {company_id}")
        return added

    async def update_cart_item(self, company_id: str, product_id: str, quantity: int) -> list[CartItem]:
        """Set the quantity of a cart line, removing it at zero"""
        if quantity < 0:
            raise CartValidationError("Quantity cannot be negative")

        stored = self._load_stored(company_id)
        items = {item.product_id: item for item in stored.items}

        if product_id not in items:
            raise NotFoundError("Item not found in cart")

        if quantity == 0:
            del items[product_id]
        else:
            priced = self.products.get_priced_product(product_id, company_id)
            if not priced:
                raise NotFoundError("Product not found")
            self._check_quantity(priced, quantity)
            items[product_id] = items[product_id].model_copy(
                update={"quantity": quantity, "added_at": datetime.utcnow()}
            )

        updated = reprice_items(list(items.values()))
        self._save_items(company_id, updated)
        return updated

    async def remove_from_cart(self, company_id: str, product_id: str) -> list[CartItem]:
        stored = self._load_stored(company_id)
        if not any(item.product_id == product_id for item in stored.items):
            raise NotFoundError("Item not found in cart")

        updated = reprice_items([i for i in stored.items if i.product_id != product_id])
        self._save_items(company_id, updated)
        return updated

    async def clear_cart(self, company_id: str) -> None:
        """Remove all items and coupons"""
        try:
            self.carts.clear(company_id)
        except Exception as e:
            raise BackendError(f"Failed to clear cart: {e}") from e

    # Coupons

    async def apply_coupon(self, company_id: str, code: str, items: list[CartItem]) -> AppliedCoupon:
        """Validate a coupon code against the cart and store it with its discount"""
        if not code or not code.strip():
            raise CartValidationError("Please enter a coupon code")

        coupon = self.coupons.find_by_code(code)
        if not coupon:
            raise NotFoundError("Coupon not found")

        stored_coupons = self._load_stored(company_id).applied_coupons

        if any(c.code.lower() == coupon.code.lower() for c in stored_coupons):
            raise CartValidationError("Coupon is already applied")

        if stored_coupons and not self.settings.allow_coupon_stacking:
            raise CartValidationError("Only one coupon can be applied per order")

        result = validate_coupon(
            coupon,
            items,
            cap_fixed_amount=self.settings.cap_fixed_amount_coupons,
        )
        if not result.is_valid:
            raise CartValidationError(result.error_message or "Coupon could not be applied")

        applied = to_applied_coupon(coupon, result.discount_amount)
        self._save_coupons(company_id, stored_coupons + [applied])

        if not self.coupons.increment_usage(coupon.id):
            logger.warning(f"Failed to increment usage of coupon {coupon.id}")

        logger.info(
            f"Coupon {coupon.code} applied to cart of {company_id}: -{applied.discount_amount:.2f}"
        )
        return applied

    async def remove_coupon(self, company_id: str, coupon_id: str) -> AppliedCoupon:
        stored_coupons = self._load_stored(company_id).applied_coupons
        removed = next((c for c in stored_coupons if c.id == coupon_id), None)
        if not removed:
            raise NotFoundError("Coupon not found")

        self._save_coupons(company_id, [c for c in stored_coupons if c.id != coupon_id])
        return removed

    async def available_coupons(self, items: list[CartItem]) -> list[Coupon]:
        """Active coupons that could apply to the given items"""
        return [c for c in self.coupons.list_active() if is_potentially_applicable(c, items)]

    # Helpers

    def build_cart_item(
        self,
        priced: PricedProduct,
        quantity: int,
        offer: Optional[PartnerOffer] = None,
        offer_product: Optional[OfferProduct] = None,
    ) -> CartItem:
        """Price a product for a quantity: partner price, then tier, then offer"""
        product = priced.product
        retail_price = product.price
        base_price = priced.base_price
        tier_price = resolve_tier_price(tier_table(priced), quantity, base_price)

        unit_price = tier_price.unit_price
        offer_fields = {}
        if offer:
            individual_discount = offer_product.individual_discount if offer_product else None
            individual_type = offer_product.individual_discount_type if offer_product else None
            unit_price = apply_offer_discount(
                unit_price,
                offer.offer_type,
                offer.discount_value,
                individual_discount,
                individual_type,
            )
            offer_fields = {
                "partner_offer_id": offer.id,
                "partner_offer_name": offer.title,
                "partner_offer_type": offer.offer_type,
                "partner_offer_discount": offer.discount_value,
                "partner_offer_original_price": retail_price,
                "partner_offer_valid_until": offer.valid_until,
                "partner_offer_applied_at": datetime.utcnow(),
                "individual_discount": individual_discount,
                "individual_discount_type": individual_type,
            }

        item = CartItem(
            product_id=product.id,
            sku=product.sku,
            name=product.name,
            category=product.category.value,
            image_url=product.image_url,
            quantity=quantity,
            unit_price=unit_price,
            retail_price=retail_price,
            minimum_order=priced.minimum_order,
            company_price=priced.company_price,
            partner_price=priced.partner_price,
            in_stock=product.in_stock,
            price_tier_1=priced.price_tier_1,
            quantity_tier_1=priced.quantity_tier_1 if priced.price_tier_1 is not None else None,
            price_tier_2=priced.price_tier_2,
            quantity_tier_2=priced.quantity_tier_2,
            price_tier_3=priced.price_tier_3,
            quantity_tier_3=priced.quantity_tier_3,
            original_unit_price=base_price,
            applied_tier=tier_price.applied_tier,
            **offer_fields,
        )
        return reprice_item(item)

    def _merge_line(
        self,
        items: dict[str, CartItem],
        company_id: str,
        product_id: str,
        quantity: int,
        offer: Optional[PartnerOffer] = None,
        offer_product: Optional[OfferProduct] = None,
    ) -> CartItem:
        """Price a new line and merge it into items in place; returns the new line"""
        if quantity < 1:
            raise CartValidationError("Quantity must be at least 1")

        priced = self.products.get_priced_product(product_id, company_id)
        if not priced:
            raise NotFoundError("Product not found")

        new_item = self.build_cart_item(priced, quantity, offer, offer_product)
        existing = items.get(product_id)
        merged = merge_cart_item(existing, new_item) if existing else new_item

        self._check_quantity(priced, merged.quantity)

        items[product_id] = merged
        return new_item

    def _check_quantity(self, priced: PricedProduct, quantity: int) -> None:
        product = priced.product
        if quantity < priced.minimum_order:
            raise CartValidationError(
                f"Minimum order quantity for {product.name} is {priced.minimum_order}"
            )
        if not product.in_stock or product.stock_quantity < quantity:
            raise CartValidationError(
                f"Insufficient stock. Available: {product.stock_quantity}"
            )
