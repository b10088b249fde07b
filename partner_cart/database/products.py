"""Product catalog, company price lists and partner offers"""

from datetime import datetime
from typing import Optional

from ..models.product import (
    Product,
    ProductCategory,
    CompanyPricing,
    PricedProduct,
    PartnerOffer,
    OfferProduct,
    OfferType,
    DiscountType,
)

# Solar equipment catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Monocrystalline Panel 450W",
        description="Half-cut cell module, 21.3% efficiency, 25-year performance warranty.",
        price=189.00,
        category=ProductCategory.PANELS,
        sku="PNL-MONO-450",
        image_url="/static/images/panel-450.jpg",
        stock_quantity=500,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Hybrid Inverter 10kW",
        description="Three-phase hybrid inverter with two MPPT trackers and battery port.",
        price=1450.00,
        category=ProductCategory.INVERTERS,
        sku="INV-HYB-10K",
        image_url="/static/images/inverter-10k.jpg",
        stock_quantity=40,
    ),
    "prod-003": Product(
        id="prod-003",
        name="LiFePO4 Battery 10kWh",
        description="Stackable lithium iron phosphate storage, 6000 cycles.",
        price=4200.00,
        category=ProductCategory.BATTERIES,
        sku="BAT-LFP-10",
        image_url="/static/images/battery-10.jpg",
        stock_quantity=15,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Roof Mounting Rail Kit",
        description="Aluminium rails, clamps and hooks for four panels on tiled roofs.",
        price=85.00,
        category=ProductCategory.MOUNTING,
        sku="MNT-RAIL-4",
        image_url="/static/images/rail-kit.jpg",
        stock_quantity=300,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Solar Cable 6mm² (100m)",
        description="UV resistant double-insulated DC cable, red/black.",
        price=129.00,
        category=ProductCategory.CABLES,
        sku="CBL-6MM-100",
        image_url="/static/images/cable-6mm.jpg",
        stock_quantity=120,
    ),
    "prod-006": Product(
        id="prod-006",
        name="MC4 Connector Pair (10x)",
        description="IP68 male/female connector pairs, 1500V DC.",
        price=24.90,
        category=ProductCategory.ACCESSORIES,
        sku="ACC-MC4-10",
        image_url="/static/images/mc4.jpg",
        stock_quantity=1000,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Power Optimizer 500W",
        description="Module-level optimizer with per-panel monitoring.",
        price=79.00,
        category=ProductCategory.ACCESSORIES,
        sku="ACC-OPT-500",
        image_url="/static/images/optimizer.jpg",
        stock_quantity=0,
    ),
}

COMPANY_PRICING: list[CompanyPricing] = [
    CompanyPricing(
        company_id="comp-001",
        product_id="prod-001",
        price_tier_1=160.00,
        quantity_tier_1=1,
        price_tier_2=150.00,
        quantity_tier_2=10,
        price_tier_3=140.00,
        quantity_tier_3=50,
    ),
    CompanyPricing(
        company_id="comp-001",
        product_id="prod-002",
        price_tier_1=1290.00,
    ),
    CompanyPricing(
        company_id="comp-001",
        product_id="prod-003",
        price_tier_1=3800.00,
        price_tier_2=3650.00,
        quantity_tier_2=5,
    ),
    CompanyPricing(
        company_id="comp-001",
        product_id="prod-004",
        price_tier_1=72.00,
        price_tier_2=68.00,
        quantity_tier_2=20,
        minimum_order=4,
    ),
    CompanyPricing(
        company_id="comp-002",
        product_id="prod-001",
        price_tier_1=165.00,
        price_tier_2=155.00,
        quantity_tier_2=20,
    ),
]

PARTNER_OFFERS: dict[str, PartnerOffer] = {
    "offer-001": PartnerOffer(
        id="offer-001",
        title="Spring Rooftop Bundle",
        description="Panels and rails for a 4.5kW rooftop system.",
        offer_type=OfferType.PERCENTAGE,
        discount_value=10.0,
        valid_until=datetime(2030, 6, 30),
        products=[
            OfferProduct(product_id="prod-001", quantity=10),
            OfferProduct(
                product_id="prod-004",
                quantity=4,
                individual_discount=5.0,
                individual_discount_type=DiscountType.PERCENTAGE,
            ),
        ],
    ),
    "offer-002": PartnerOffer(
        id="offer-002",
        title="Inverter Upgrade",
        offer_type=OfferType.FIXED_AMOUNT,
        discount_value=90.0,
        products=[OfferProduct(product_id="prod-002", quantity=1)],
    ),
    "offer-003": PartnerOffer(
        id="offer-003",
        title="Winter Storage Deal",
        offer_type=OfferType.PERCENTAGE,
        discount_value=15.0,
        is_active=False,
        products=[OfferProduct(product_id="prod-003", quantity=1)],
    ),
}


class ProductDatabase:
    """In-memory product catalog with company-specific pricing"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.products = {pid: p.model_copy() for pid, p in PRODUCTS.items()}
        self.pricing = {(p.company_id, p.product_id): p for p in COMPANY_PRICING}
        self.offers = dict(PARTNER_OFFERS)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get an active product by ID"""
        product = self.products.get(product_id)
        if product and not product.is_active:
            return None
        return product

    def get_company_pricing(self, company_id: str, product_id: str) -> Optional[CompanyPricing]:
        return self.pricing.get((company_id, product_id))

    def get_priced_product(self, product_id: str, company_id: str) -> Optional[PricedProduct]:
        """
        Get a product joined with the company's price list.

        Products without a company price list fall back to retail price.
        """
        product = self.get_product(product_id)
        if not product:
            return None

        pricing = self.get_company_pricing(company_id, product_id)
        if not pricing:
            return PricedProduct(product=product)

        return PricedProduct(
            product=product,
            company_price=pricing.price_tier_1,
            # Tier 1 is the standard partner price
            partner_price=pricing.price_tier_1,
            minimum_order=pricing.minimum_order,
            price_tier_1=pricing.price_tier_1,
            quantity_tier_1=pricing.quantity_tier_1 or 1,
            price_tier_2=pricing.price_tier_2,
            quantity_tier_2=pricing.quantity_tier_2,
            price_tier_3=pricing.price_tier_3,
            quantity_tier_3=pricing.quantity_tier_3,
        )

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        in_stock_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = [p for p in self.products.values() if p.is_active]

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if in_stock_only:
            results = [p for p in results if p.in_stock]

        total = len(results)
        return results[offset : offset + limit], total

    def get_offer(self, offer_id: str) -> Optional[PartnerOffer]:
        """Get an active partner offer by ID"""
        offer = self.offers.get(offer_id)
        if offer and not offer.is_active:
            return None
        return offer

    def update_stock(self, product_id: str, quantity_change: int) -> bool:
        """
        Update product stock.

        Args:
            product_id: Product to update
            quantity_change: Positive to add, negative to remove

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product:
            return False

        new_quantity = product.stock_quantity + quantity_change
        if new_quantity < 0:
            return False

        product.stock_quantity = new_quantity
        return True


# Singleton instance
product_db = ProductDatabase()
