"""Search application service.

Header live search (products and categories) and category-scoped
product search.
"""

from dataclasses import dataclass, field

import structlog

from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.domain.entities import Category, Product
from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import DocumentStore, get_document_store

logger = structlog.get_logger()

UNCATEGORIZED = "Uncategorized"


@dataclass
class ProductHit:
    """A product search result with its category names."""

    product: Product
    category_names: list[str]


@dataclass
class SearchResults:
    """Combined search results."""

    products: list[ProductHit] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.products) + len(self.categories)


class SearchService:
    """Service for catalog search."""

    def __init__(self, store: DocumentStore | None = None) -> None:
        self.store = store or get_document_store()
        self.products = ProductRepository(self.store)
        self.categories = CategoryRepository(self.store)

    async def search(self, query: str) -> SearchResults:
        """Match products on name or description and categories on name.

        A blank query returns no results.
        """
        query = query.strip()
        if not query:
            return SearchResults()

        products = await self.products.search(query, limit=settings.search_product_limit)
        categories = await self.categories.search(query, limit=settings.search_category_limit)
        results = SearchResults(
            products=await self._with_category_names(products),
            categories=categories,
        )
        logger.debug("Search completed", query=query, result_count=len(results))
        return results

    async def search_in_categories(
        self,
        query: str,
        category_ids: list[str] | None = None,
    ) -> list[ProductHit]:
        """Products matching the text query within any of the given categories.

        Either criterion may be omitted; with neither, nothing is returned.
        """
        query = query.strip()
        wanted = {c for c in category_ids or [] if c}
        if not query and not wanted:
            return []

        needle = query.lower()
        matches = [
            product
            for product in await self.products.list_all()
            if (
                not needle
                or needle in product.name.lower()
                or needle in product.description.lower()
            )
            and (not wanted or wanted.intersection(product.categories))
        ][: settings.category_search_limit]

        logger.debug(
            "Category search completed",
            query=query,
            categories=sorted(wanted),
            result_count=len(matches),
        )
        return await self._with_category_names(matches)

    async def _with_category_names(self, products: list[Product]) -> list[ProductHit]:
        names = {c.id: c.name for c in await self.categories.list_all()}
        return [
            ProductHit(
                product=product,
                category_names=[names.get(c, UNCATEGORIZED) for c in product.categories],
            )
            for product in products
        ]
