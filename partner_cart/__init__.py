"""Partner cart pricing and coupon service"""

__version__ = "1.0.0"
