"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from storefront.api.admin_categories import router as admin_categories_router
from storefront.api.admin_products import router as admin_products_router
from storefront.api.health import router as health_router
from storefront.api.public import router as public_router
from storefront.api.search import router as search_router
from storefront.api.sessions import router as sessions_router
from storefront.api.shop import router as shop_router

__all__ = [
    "admin_categories_router",
    "admin_products_router",
    "health_router",
    "public_router",
    "search_router",
    "sessions_router",
    "shop_router",
]
