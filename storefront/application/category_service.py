"""Category application service.

Create, update and delete categories while keeping the hierarchy valid:
parents must exist, re-parenting may not create a cycle, slugs are
unique and categories with children cannot be deleted.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

import structlog

from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.taxonomy import CategoryTree, would_create_cycle
from storefront.domain.entities import Category
from storefront.domain.exceptions import (
    CategoryCycleError,
    CategoryHasChildrenError,
    CategoryNotFoundError,
    DuplicateSlugError,
    MissingFieldError,
)
from storefront.domain.value_objects import slugify
from storefront.infrastructure.document_store import (
    DocumentStore,
    get_document_store,
    new_document_id,
)

logger = structlog.get_logger()

UNSET = object()


@dataclass
class CategoryNode:
    """A category with its depth and product count, for tree listings."""

    category: Category
    level: int
    product_count: int = 0


class CategoryService:
    """Service for category operations."""

    def __init__(self, store: DocumentStore | None = None) -> None:
        self.store = store or get_document_store()
        self.categories = CategoryRepository(self.store)
        self.products = ProductRepository(self.store)

    async def get_tree(self) -> CategoryTree:
        """Indexed tree of all categories."""
        return CategoryTree(await self.categories.list_all())

    async def list_flattened(self) -> list[CategoryNode]:
        """All categories in pre-order with depth and product counts."""
        tree = await self.get_tree()
        counts = await self.products.count_by_category()
        return [
            CategoryNode(category=category, level=level, product_count=counts.get(category.id, 0))
            for category, level in tree.flattened()
        ]

    async def get(self, category_id: str) -> Category:
        """Get a category by id.

        Raises:
            CategoryNotFoundError: If it does not exist.
        """
        category = await self.categories.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def create(
        self,
        name: str,
        description: str | None = None,
        parent_id: str | None = None,
        image: str | None = None,
    ) -> Category:
        """Create a category.

        Raises:
            MissingFieldError: If the name is blank.
            CategoryNotFoundError: If the parent does not exist.
            DuplicateSlugError: If another category has the same slug.
        """
        if not name or not name.strip():
            raise MissingFieldError("Category name is required", ["name"])

        if parent_id:
            await self.get(parent_id)

        slug = slugify(name)
        if await self.categories.get_by_slug(slug) is not None:
            raise DuplicateSlugError("category", slug)

        category = Category(
            id=new_document_id(),
            name=name.strip(),
            slug=slug,
            parent_id=parent_id or None,
            description=(description or "").strip(),
            image=image or None,
        )
        await self.categories.save(category)

        logger.info(
            "Category created",
            category_id=category.id,
            slug=category.slug,
            parent_id=category.parent_id,
        )
        return category

    async def update(
        self,
        category_id: str,
        name: str | None = None,
        description: str | None = None,
        parent_id: str | None | object = UNSET,
        image: str | None | object = UNSET,
    ) -> Category:
        """Update a category.

        ``parent_id`` and ``image`` are left alone unless passed; passing
        None clears them.

        Raises:
            CategoryNotFoundError: If the category or new parent is missing.
            CategoryCycleError: If the new parent is the category or a descendant.
            DuplicateSlugError: If the new name's slug is taken.
        """
        category = await self.get(category_id)

        if parent_id is not UNSET:
            new_parent = parent_id or None
            if new_parent is not None:
                await self.get(new_parent)
                if would_create_cycle(await self.categories.list_all(), category_id, new_parent):
                    raise CategoryCycleError(category_id)
            category.parent_id = new_parent

        if name is not None and name.strip() and name.strip() != category.name:
            slug = slugify(name)
            existing = await self.categories.get_by_slug(slug)
            if existing is not None and existing.id != category_id:
                raise DuplicateSlugError("category", slug)
            category.name = name.strip()
            category.slug = slug

        if description is not None:
            category.description = description.strip()
        if image is not UNSET:
            category.image = image or None

        category.updated_at = datetime.now(timezone.utc)
        await self.categories.save(category)

        logger.info("Category updated", category_id=category_id)
        return category

    async def delete(self, category_id: str) -> None:
        """Delete a category without subcategories.

        Raises:
            CategoryNotFoundError: If it does not exist.
            CategoryHasChildrenError: If it still has subcategories.
        """
        await self.get(category_id)
        children = await self.categories.list_children(category_id)
        if children:
            raise CategoryHasChildrenError(category_id, len(children))
        await self.categories.delete(category_id)
        logger.info("Category deleted", category_id=category_id)
