"""Catalog filter and sort pipeline.

Applies the storefront's filter criteria to an already-fetched product
list, then orders the survivors:

    result = apply(products, FilterCriteria(price_range=(20, 100)), "price", "asc")

Price filtering and price sorting both use the effective price (discount
price when set, list price otherwise). Sorting is stable: products with
equal sort keys keep their input order in either direction.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from storefront.domain.entities import Product


class SortField(str, Enum):
    """Supported sort fields."""

    NAME = "name"
    PRICE = "price"
    RATING = "rating"
    FEATURED = "featured"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


@dataclass
class FilterCriteria:
    """Storefront filter selections.

    Attributes:
        category_ids: Keep products in any of these categories (empty = all).
        price_range: Inclusive (min, max) on effective price, None = no bound.
        in_stock_only: Keep only in-stock products.
        featured_only: Keep only featured products.
        offer_only: Keep only today's-offer products.
    """

    category_ids: list[str] = field(default_factory=list)
    price_range: tuple[float, float] | None = None
    in_stock_only: bool = False
    featured_only: bool = False
    offer_only: bool = False

    @property
    def is_empty(self) -> bool:
        return not (
            self.category_ids
            or self.price_range
            or self.in_stock_only
            or self.featured_only
            or self.offer_only
        )


SORT_KEYS: dict[SortField, Callable[[Product], Any]] = {
    SortField.NAME: lambda p: p.name.casefold(),
    SortField.PRICE: lambda p: p.effective_price,
    SortField.RATING: lambda p: p.rating or 0,
    SortField.FEATURED: lambda p: 1 if p.featured else 0,
}


def matches_categories(product: Product, category_ids: Iterable[str]) -> bool:
    """Whether a product belongs to any selected category (case-insensitive)."""
    selected = {c.lower() for c in category_ids}
    if not selected:
        return True
    return any(c.lower() in selected for c in product.categories)


def filter_products(products: Iterable[Product], criteria: FilterCriteria) -> list[Product]:
    """Apply all active predicates, AND-composed."""
    result = list(products)
    if criteria.is_empty:
        return result

    if criteria.category_ids:
        result = [p for p in result if matches_categories(p, criteria.category_ids)]

    if criteria.price_range is not None:
        low, high = criteria.price_range
        result = [p for p in result if low <= p.effective_price <= high]

    if criteria.in_stock_only:
        result = [p for p in result if p.in_stock]

    if criteria.featured_only:
        result = [p for p in result if p.featured]

    if criteria.offer_only:
        result = [p for p in result if p.today_offer]

    return result


def sort_products(
    products: Iterable[Product],
    sort_by: SortField | str = SortField.NAME,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[Product]:
    """Stable sort by a resolved field; unknown fields sort by name."""
    try:
        field_ = SortField(sort_by)
    except ValueError:
        field_ = SortField.NAME
    try:
        descending = SortOrder(sort_order) is SortOrder.DESC
    except ValueError:
        descending = False
    return sorted(products, key=SORT_KEYS[field_], reverse=descending)


def apply(
    products: Iterable[Product] | None,
    criteria: FilterCriteria | None = None,
    sort_by: SortField | str = SortField.NAME,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[Product]:
    """Filter then sort a product list.

    A missing or non-list input yields an empty list.
    """
    if products is None or not isinstance(products, (list, tuple)):
        return []
    filtered = filter_products(products, criteria or FilterCriteria())
    return sort_products(filtered, sort_by, sort_order)
