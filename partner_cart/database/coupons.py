"""Coupon catalog"""

from datetime import datetime
from typing import Optional

from ..models.coupon import Coupon, CouponType

COUPONS: list[Coupon] = [
    Coupon(
        id="cpn-001",
        code="SPRING10",
        title="Spring 10% off",
        description="10% off the whole cart",
        discount_type=CouponType.PERCENTAGE,
        discount_value=10.0,
        start_date=datetime(2024, 1, 1),
        featured=True,
    ),
    Coupon(
        id="cpn-002",
        code="SAVE50",
        title="50 off",
        discount_type=CouponType.FIXED_AMOUNT,
        discount_value=50.0,
        start_date=datetime(2024, 1, 1),
    ),
    Coupon(
        id="cpn-003",
        code="FREESHIP",
        title="Free delivery",
        discount_type=CouponType.FREE_SHIPPING,
        discount_value=0.0,
        start_date=datetime(2024, 1, 1),
    ),
    Coupon(
        id="cpn-004",
        code="PANELS15",
        title="15% off panels",
        discount_type=CouponType.PERCENTAGE,
        discount_value=15.0,
        max_discount_amount=200.0,
        applicable_categories=["panels"],
        start_date=datetime(2024, 1, 1),
    ),
    Coupon(
        id="cpn-005",
        code="BIG100",
        title="100 off orders over 2000",
        discount_type=CouponType.FIXED_AMOUNT,
        discount_value=100.0,
        min_order_amount=2000.0,
        start_date=datetime(2024, 1, 1),
    ),
    Coupon(
        id="cpn-006",
        code="WINTER5",
        title="Winter 5%",
        discount_type=CouponType.PERCENTAGE,
        discount_value=5.0,
        start_date=datetime(2023, 11, 1),
        end_date=datetime(2024, 2, 28),
    ),
    Coupon(
        id="cpn-007",
        code="LAUNCH20",
        title="Launch 20%",
        discount_type=CouponType.PERCENTAGE,
        discount_value=20.0,
        max_usage=1,
        current_usage=1,
        start_date=datetime(2024, 1, 1),
    ),
]


class CouponDatabase:
    """In-memory coupon catalog"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.coupons = {c.id: c.model_copy() for c in COUPONS}

    def get_coupon(self, coupon_id: str) -> Optional[Coupon]:
        return self.coupons.get(coupon_id)

    def find_by_code(self, code: str) -> Optional[Coupon]:
        """Find an active coupon by code, ignoring case"""
        code_lower = code.strip().lower()
        for coupon in self.coupons.values():
            if coupon.is_active and coupon.code.lower() == code_lower:
                return coupon
        return None

    def list_active(self, now: Optional[datetime] = None) -> list[Coupon]:
        """Active coupons inside their validity window, featured first"""
        now = now or datetime.utcnow()
        coupons = [
            c for c in self.coupons.values()
            if c.is_active and c.start_date <= now and (c.end_date is None or c.end_date >= now)
        ]
        coupons.sort(key=lambda c: not c.featured)
        return coupons

    def increment_usage(self, coupon_id: str) -> bool:
        coupon = self.coupons.get(coupon_id)
        if not coupon:
            return False
        coupon.current_usage += 1
        return True


# Singleton instance
coupon_db = CouponDatabase()
