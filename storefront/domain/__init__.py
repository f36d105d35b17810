"""Domain layer.

Entities, value objects and business rules for the catalog, cart and
comparison set.
"""

from storefront.domain.cart import Cart, CartEntry
from storefront.domain.comparison import AddOutcome, AddResult, ComparisonSet
from storefront.domain.entities import Category, Product, Review, Variant
from storefront.domain.value_objects import (
    Attribute,
    Dimensions,
    MediaItem,
    PendingVariantId,
    PersistedVariantId,
    Specification,
    VariantAttribute,
    VariantId,
    effective_price,
    slugify,
)

__all__ = [
    # Entities
    "Category",
    "Product",
    "Review",
    "Variant",
    # Value objects
    "Attribute",
    "Dimensions",
    "MediaItem",
    "PendingVariantId",
    "PersistedVariantId",
    "Specification",
    "VariantAttribute",
    "VariantId",
    "effective_price",
    "slugify",
    # Session state
    "AddOutcome",
    "AddResult",
    "Cart",
    "CartEntry",
    "ComparisonSet",
]
