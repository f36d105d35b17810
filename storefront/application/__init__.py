"""Application layer - use case services.

Services orchestrate repositories, catalog utilities and media storage
for the admin backend and the storefront.
"""

from storefront.application.category_service import CategoryService
from storefront.application.product_service import ProductService
from storefront.application.review_service import ReviewService
from storefront.application.search_service import SearchService
from storefront.application.seed_service import SeedService
from storefront.application.session_service import SessionService
from storefront.application.shop_service import ShopService

__all__ = [
    "CategoryService",
    "ProductService",
    "ReviewService",
    "SearchService",
    "SeedService",
    "SessionService",
    "ShopService",
]
