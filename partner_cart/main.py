"""
Partner Cart Application

Company-scoped cart service for partner purchasing: quantity tier pricing,
partner offers, coupons, totals and checkout.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import settings
from .routes import products_router, cart_router, coupons_router, checkout_router
from .store.cart_store import store_registry

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Background sync: {'enabled' if settings.sync_enabled else 'disabled'}")
    yield
    await store_registry.close_all()
    logger.info(f"{settings.app_name} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Partner cart with tier pricing, offers and coupons",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(coupons_router)
app.include_router(checkout_router)


@app.get("/")
async def home():
    return {
        "message": "Partner Cart API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/companies/{company_id}/cart",
            "coupons": "/api/companies/{company_id}/cart/coupons",
            "checkout": "/api/companies/{company_id}/checkout",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "partner-cart"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "partner_cart.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
