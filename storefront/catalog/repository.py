"""Repositories for catalog documents.

Translate between domain entities and the documents kept in the
document store.
"""

from storefront.domain.entities import Category, Product, Review
from storefront.infrastructure.document_store import (
    CATEGORIES,
    PRODUCTS,
    REVIEWS,
    DocumentStore,
    field_equals,
)


class CategoryRepository:
    """Repository for Category documents.

    Example usage:
        repo = CategoryRepository(get_document_store())
        categories = await repo.list_all()
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def save(self, category: Category) -> Category:
        """Insert or replace a category."""
        document = category.to_document()
        if not await self.store.replace(CATEGORIES, category.id, document):
            await self.store.insert(CATEGORIES, document)
        return category

    async def get_by_id(self, category_id: str) -> Category | None:
        document = await self.store.get(CATEGORIES, category_id)
        return Category.from_document(document) if document else None

    async def get_by_slug(self, slug: str) -> Category | None:
        document = await self.store.find_one(CATEGORIES, field_equals(slug=slug))
        return Category.from_document(document) if document else None

    async def list_all(self) -> list[Category]:
        return [Category.from_document(d) for d in await self.store.find(CATEGORIES)]

    async def list_children(self, category_id: str) -> list[Category]:
        documents = await self.store.find(CATEGORIES, field_equals(parent_id=category_id))
        return [Category.from_document(d) for d in documents]

    async def search(self, query: str, limit: int | None = None) -> list[Category]:
        """Case-insensitive substring match on name."""
        needle = query.lower()
        documents = await self.store.find(
            CATEGORIES,
            lambda d: needle in (d.get("name") or "").lower(),
            limit=limit,
        )
        return [Category.from_document(d) for d in documents]

    async def delete(self, category_id: str) -> bool:
        return await self.store.delete(CATEGORIES, category_id)


class ProductRepository:
    """Repository for Product documents.

    Handles all store interactions for products. Listings are returned
    newest first.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def save(self, product: Product) -> Product:
        """Insert or replace a product."""
        document = product.to_document()
        if not await self.store.replace(PRODUCTS, product.id, document):
            await self.store.insert(PRODUCTS, document)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        document = await self.store.get(PRODUCTS, product_id)
        return Product.from_document(document) if document else None

    async def get_by_slug(self, slug: str) -> Product | None:
        document = await self.store.find_one(PRODUCTS, field_equals(slug=slug))
        return Product.from_document(document) if document else None

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        document = await self.store.find_one(
            PRODUCTS,
            lambda d: d.get("slug") == slug and d.get("id") != exclude_id,
        )
        return document is not None

    async def list_all(self) -> list[Product]:
        products = [Product.from_document(d) for d in await self.store.find(PRODUCTS)]
        products.sort(key=lambda p: p.created_at, reverse=True)
        return products

    async def search(self, query: str, limit: int | None = None) -> list[Product]:
        """Case-insensitive substring match on name or description."""
        needle = query.lower()
        documents = await self.store.find(
            PRODUCTS,
            lambda d: needle in (d.get("name") or "").lower()
            or needle in (d.get("description") or "").lower(),
            limit=limit,
        )
        return [Product.from_document(d) for d in documents]

    async def count_by_category(self) -> dict[str, int]:
        """Number of products referencing each category id."""
        counts: dict[str, int] = {}
        for document in await self.store.find(PRODUCTS):
            for category_id in document.get("categories") or []:
                counts[category_id] = counts.get(category_id, 0) + 1
        return counts

    async def delete(self, product_id: str) -> bool:
        return await self.store.delete(PRODUCTS, product_id)


class ReviewRepository:
    """Repository for Review documents."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def save(self, review: Review) -> Review:
        await self.store.insert(REVIEWS, review.to_document())
        return review

    async def list_for_product(self, product_slug: str) -> list[Review]:
        documents = await self.store.find(REVIEWS, field_equals(product_slug=product_slug))
        return [Review.from_document(d) for d in documents]
