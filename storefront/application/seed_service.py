"""Sample catalog seeding service."""

from typing import Any

import structlog

from storefront.catalog.generator import CatalogGenerator, GeneratorConfig
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.infrastructure.document_store import (
    CATEGORIES,
    PRODUCTS,
    REVIEWS,
    DocumentStore,
    get_document_store,
)

logger = structlog.get_logger()


class SeedService:
    """Loads a generated sample catalog into the document store.

    Example usage:
        result = await SeedService().seed_catalog(mode="small")
    """

    def __init__(self, store: DocumentStore | None = None) -> None:
        self.store = store or get_document_store()
        self.categories = CategoryRepository(self.store)
        self.products = ProductRepository(self.store)

    async def seed_catalog(self, mode: str = "small", clear_existing: bool = True) -> dict[str, Any]:
        """Seed categories and products.

        Args:
            mode: Catalog size ("small" or "full").
            clear_existing: Whether to delete existing catalog documents first.

        Returns:
            Seeding result with counts.
        """
        config = GeneratorConfig.full() if mode == "full" else GeneratorConfig.small()

        deleted = 0
        if clear_existing:
            for collection in (REVIEWS, PRODUCTS, CATEGORIES):
                deleted += await self.store.clear(collection)

        catalog = CatalogGenerator(config).generate()
        for category in catalog.categories:
            await self.categories.save(category)
        for product in catalog.products:
            await self.products.save(product)

        result = {
            "mode": mode,
            "deleted": deleted,
            "categories_created": len(catalog.categories),
            "products_created": len(catalog.products),
            "variants_created": catalog.variant_count,
            "brands_used": len({p.brand for p in catalog.products}),
        }
        logger.info("Catalog seeded", **result)
        return result
