"""Shop page application service.

Builds the storefront shop view: resolves the selected category, runs the
filter/sort pipeline over the full catalog and reveals a window of the
result through ``LazyReveal``.
"""

from dataclasses import dataclass, field

import structlog

from storefront.catalog.pipeline import FilterCriteria, SortField, SortOrder, apply
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.reveal import LazyReveal
from storefront.catalog.taxonomy import CategoryTree
from storefront.domain.entities import Category, Product
from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import DocumentStore, get_document_store

logger = structlog.get_logger()


@dataclass
class ShopQuery:
    """Shop page selections.

    Attributes:
        category: Category slug from the URL; unknown slugs clear the selection.
        categories: Additional selected category ids.
        min_price: Lower price bound.
        max_price: Upper price bound.
        in_stock: Only in-stock products.
        featured: Only featured products.
        today_offer: Only today's offers.
        sort_by: Sort field.
        sort_order: Sort direction.
        pages: Number of pages revealed so far.
    """

    category: str | None = None
    categories: list[str] = field(default_factory=list)
    min_price: float | None = None
    max_price: float | None = None
    in_stock: bool = False
    featured: bool = False
    today_offer: bool = False
    sort_by: str = SortField.NAME.value
    sort_order: str = SortOrder.ASC.value
    pages: int = 1

    def criteria(self, category_ids: list[str]) -> FilterCriteria:
        price_range = None
        if self.min_price is not None or self.max_price is not None:
            price_range = (
                self.min_price if self.min_price is not None else 0,
                self.max_price if self.max_price is not None else float("inf"),
            )
        return FilterCriteria(
            category_ids=category_ids,
            price_range=price_range,
            in_stock_only=self.in_stock,
            featured_only=self.featured,
            offer_only=self.today_offer,
        )


@dataclass
class ShopView:
    """One render of the shop page."""

    items: list[Product]
    total: int
    has_more: bool
    selected_categories: list[Category]
    category_levels: list[tuple[Category, int]]


class ShopService:
    """Service for the shop page."""

    def __init__(self, store: DocumentStore | None = None) -> None:
        self.store = store or get_document_store()
        self.products = ProductRepository(self.store)
        self.categories = CategoryRepository(self.store)

    async def view(self, query: ShopQuery | None = None) -> ShopView:
        """Filter, sort and reveal ``query.pages`` pages of the catalog."""
        query = query or ShopQuery()
        tree = CategoryTree(await self.categories.list_all())

        selected: list[Category] = []
        category_ids: list[str] = []
        if query.category:
            found = tree.get_by_slug(query.category)
            if found is None:
                logger.warning("Shop category slug not found", slug=query.category)
            else:
                selected.append(found)
                category_ids.append(found.id)

        # Requested ids filter as given; unknown ids match nothing.
        by_lower_id = {c.id.lower(): c for c, _ in tree.flattened()}
        for category_id in query.categories:
            category_ids.append(category_id)
            found = by_lower_id.get(category_id.lower())
            if found is not None and found not in selected:
                selected.append(found)

        results = apply(
            await self.products.list_all(),
            query.criteria(category_ids),
            query.sort_by,
            query.sort_order,
        )

        reveal: LazyReveal[Product] = LazyReveal(page_size=settings.shop_page_size, delay=0)
        reveal.set_total(len(results))
        for _ in range(max(query.pages, 1) - 1):
            if not await reveal.load_more():
                break

        logger.debug(
            "Shop view built",
            total=len(results),
            visible=reveal.shown_count,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
        )
        return ShopView(
            items=reveal.visible(results),
            total=len(results),
            has_more=reveal.has_more,
            selected_categories=selected,
            category_levels=tree.flattened(),
        )
