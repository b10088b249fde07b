"""Partner Cart Configuration"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Partner Cart"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8002
    currency: str = "EUR"

    # Totals
    vat_rate: float = 0.25
    free_shipping_threshold: float = 1000.0
    flat_shipping_rate: float = 50.0
    # Totals do not subtract coupon discounts unless enabled
    subtract_coupon_discount: bool = False
    free_shipping_coupons_apply: bool = False

    # Coupons
    cap_fixed_amount_coupons: bool = True
    allow_coupon_stacking: bool = False

    # Tier upsell hints (max units short of the next tier)
    tier_2_hint_window: int = 5
    tier_3_hint_window: int = 10

    # Background sync
    sync_enabled: bool = True
    sync_interval_seconds: float = 300.0

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        env_prefix = "PARTNER_CART_"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
