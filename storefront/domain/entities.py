"""Domain entities.

Categories, products, variants and reviews, with conversion to and from
the JSON documents kept in the document store.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Self

from storefront.domain.base import Entity
from storefront.domain.value_objects import (
    Attribute,
    Dimensions,
    MediaItem,
    PersistedVariantId,
    Specification,
    VariantAttribute,
    VariantId,
    effective_price,
    variant_id_from_dict,
    variant_id_to_dict,
)

ProductType = Literal["simple", "variable"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return utcnow()


# ============================================================================
# Category
# ============================================================================


@dataclass(eq=False)
class Category(Entity[str]):
    """A node in the category hierarchy.

    Attributes:
        id: Category identifier.
        name: Display name.
        slug: URL slug derived from the name.
        parent_id: Parent category id, None for roots.
        description: Optional description.
        image: Optional image URL.
        children: Derived child categories; never stored.
    """

    name: str = ""
    slug: str = ""
    parent_id: str | None = None
    description: str = ""
    image: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    children: list["Category"] = field(default_factory=list, repr=False)

    def to_document(self) -> dict[str, Any]:
        """Convert to a storable document (children excluded)."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "parent_id": self.parent_id,
            "description": self.description,
            "image": self.image,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(
            id=str(document["id"]),
            name=document.get("name", ""),
            slug=document.get("slug", ""),
            parent_id=document.get("parent_id") or None,
            description=document.get("description") or "",
            image=document.get("image"),
            created_at=_parse_datetime(document.get("created_at")),
            updated_at=_parse_datetime(document.get("updated_at")),
        )


# ============================================================================
# Variant
# ============================================================================


@dataclass(eq=False)
class Variant(Entity[VariantId]):
    """A sellable configuration of a variable product.

    Carries exactly one value per product attribute.
    """

    name: str = ""
    sku: str = ""
    price: float = 0
    discount_price: float | None = None
    in_stock: bool = True
    stock_quantity: int = 0
    attributes: list[VariantAttribute] = field(default_factory=list)
    specifications: list[Specification] = field(default_factory=list)
    media: list[MediaItem] = field(default_factory=list)
    image: str | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id.is_persisted

    @property
    def effective_price(self) -> float:
        return effective_price(self.price, self.discount_price)

    @property
    def attribute_names(self) -> set[str]:
        return {attr.name for attr in self.attributes}

    def to_document(self) -> dict[str, Any]:
        return {
            "id": variant_id_to_dict(self.id),
            "name": self.name,
            "sku": self.sku,
            "price": self.price,
            "discount_price": self.discount_price,
            "in_stock": self.in_stock,
            "stock_quantity": self.stock_quantity,
            "attributes": [a.to_dict() for a in self.attributes],
            "specifications": [s.to_dict() for s in self.specifications],
            "media": [m.to_dict() for m in self.media],
            "image": self.image,
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        raw_id = document.get("id")
        if isinstance(raw_id, str) and raw_id:
            variant_id: VariantId = PersistedVariantId(id=raw_id)
        else:
            variant_id = variant_id_from_dict(raw_id)
        return cls(
            id=variant_id,
            name=document.get("name") or "",
            sku=document.get("sku") or "",
            price=float(document.get("price") or 0),
            discount_price=document.get("discount_price"),
            in_stock=bool(document.get("in_stock", True)),
            stock_quantity=int(document.get("stock_quantity") or 0),
            attributes=[VariantAttribute.from_dict(a) for a in document.get("attributes") or []],
            specifications=[
                Specification.from_dict(s) for s in document.get("specifications") or []
            ],
            media=[MediaItem.from_dict(m) for m in document.get("media") or []],
            image=document.get("image"),
        )


# ============================================================================
# Product
# ============================================================================


@dataclass(eq=False)
class Product(Entity[str]):
    """A catalog product.

    Simple products carry their own price and stock; variable products
    define attributes and one variant per attribute combination.
    """

    name: str = ""
    slug: str = ""
    description: str = ""
    price: float = 0
    discount_price: float | None = None
    type: ProductType = "simple"
    categories: list[str] = field(default_factory=list)
    image: str = ""
    additional_media: list[MediaItem] = field(default_factory=list)
    specifications: list[Specification] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    variants: list[Variant] = field(default_factory=list)
    sku: str = ""
    brand: str = ""
    in_stock: bool = True
    stock_quantity: int = 0
    rating: float = 0
    review_count: int = 0
    today_offer: bool = False
    featured: bool = False
    seo_title: str = ""
    seo_description: str = ""
    weight: float = 0
    dimensions: Dimensions = field(default_factory=Dimensions)
    shipping_class: str = ""
    has_guarantee: bool = False
    has_referral: bool = False
    has_exchange: bool = False
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def effective_price(self) -> float:
        return effective_price(self.price, self.discount_price)

    def price_range(self) -> tuple[float, float]:
        """Lowest and highest effective price across variants.

        Simple products, and variable products without variants, report
        their own effective price for both ends.
        """
        if self.type == "variable" and self.variants:
            prices = [v.effective_price for v in self.variants]
            return min(prices), max(prices)
        return self.effective_price, self.effective_price

    def get_variant(self, variant_id: str) -> Variant | None:
        return next((v for v in self.variants if str(v.id) == variant_id), None)

    def to_document(self) -> dict[str, Any]:
        """Convert to a storable document."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": self.price,
            "discount_price": self.discount_price,
            "type": self.type,
            "categories": list(self.categories),
            "image": self.image,
            "additional_media": [m.to_dict() for m in self.additional_media],
            "specifications": [s.to_dict() for s in self.specifications],
            "attributes": [a.to_dict() for a in self.attributes],
            "variants": [v.to_document() for v in self.variants],
            "sku": self.sku,
            "brand": self.brand,
            "in_stock": self.in_stock,
            "stock_quantity": self.stock_quantity,
            "rating": self.rating,
            "review_count": self.review_count,
            "today_offer": self.today_offer,
            "featured": self.featured,
            "seo_title": self.seo_title,
            "seo_description": self.seo_description,
            "weight": self.weight,
            "dimensions": self.dimensions.to_dict(),
            "shipping_class": self.shipping_class,
            "has_guarantee": self.has_guarantee,
            "has_referral": self.has_referral,
            "has_exchange": self.has_exchange,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(
            id=str(document["id"]),
            name=document.get("name", ""),
            slug=document.get("slug", ""),
            description=document.get("description") or "",
            price=float(document.get("price") or 0),
            discount_price=document.get("discount_price"),
            type="variable" if document.get("type") == "variable" else "simple",
            categories=[str(c) for c in document.get("categories") or []],
            image=document.get("image") or "",
            additional_media=[
                MediaItem.from_dict(m) for m in document.get("additional_media") or []
            ],
            specifications=[
                Specification.from_dict(s) for s in document.get("specifications") or []
            ],
            attributes=[Attribute.from_dict(a) for a in document.get("attributes") or []],
            variants=[Variant.from_document(v) for v in document.get("variants") or []],
            sku=document.get("sku") or "",
            brand=document.get("brand") or "",
            in_stock=bool(document.get("in_stock", True)),
            stock_quantity=int(document.get("stock_quantity") or 0),
            rating=float(document.get("rating") or 0),
            review_count=int(document.get("review_count") or 0),
            today_offer=bool(document.get("today_offer", False)),
            featured=bool(document.get("featured", False)),
            seo_title=document.get("seo_title") or "",
            seo_description=document.get("seo_description") or "",
            weight=float(document.get("weight") or 0),
            dimensions=Dimensions.from_dict(document.get("dimensions")),
            shipping_class=document.get("shipping_class") or "",
            has_guarantee=bool(document.get("has_guarantee", False)),
            has_referral=bool(document.get("has_referral", False)),
            has_exchange=bool(document.get("has_exchange", False)),
            created_at=_parse_datetime(document.get("created_at")),
            updated_at=_parse_datetime(document.get("updated_at")),
        )


# ============================================================================
# Review
# ============================================================================


@dataclass(eq=False)
class Review(Entity[str]):
    """A customer review of a product."""

    product_slug: str = ""
    username: str = ""
    email: str = ""
    rating: int = 0
    comment: str = ""
    verified: bool = True
    helpful: int = 0
    created_at: datetime = field(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "product_slug": self.product_slug,
            "username": self.username,
            "email": self.email,
            "rating": self.rating,
            "comment": self.comment,
            "verified": self.verified,
            "helpful": self.helpful,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Self:
        return cls(
            id=str(document["id"]),
            product_slug=document.get("product_slug", ""),
            username=document.get("username", ""),
            email=document.get("email", ""),
            rating=int(document.get("rating") or 0),
            comment=document.get("comment", ""),
            verified=bool(document.get("verified", True)),
            helpful=int(document.get("helpful") or 0),
            created_at=_parse_datetime(document.get("created_at")),
        )
