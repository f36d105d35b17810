"""Shopping cart.

The cart holds one line per (product, variant) key. Lines keep a small
snapshot of the product and variant so the cart can be rendered and
totalled without refetching the catalog.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from storefront.domain.entities import Product, Variant
from storefront.domain.exceptions import CartItemNotFoundError
from storefront.domain.value_objects import effective_price

logger = structlog.get_logger()

CartKey = tuple[str, str | None]


@dataclass(frozen=True)
class ProductSnapshot:
    """Storage-safe subset of a product."""

    id: str
    name: str
    slug: str
    price: float
    discount_price: float | None
    image: str
    in_stock: bool
    stock_quantity: int
    type: str

    @classmethod
    def of(cls, product: Product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            slug=product.slug,
            price=product.price,
            discount_price=product.discount_price,
            image=product.image,
            in_stock=product.in_stock,
            stock_quantity=product.stock_quantity,
            type=product.type,
        )


@dataclass(frozen=True)
class VariantSnapshot:
    """Storage-safe subset of a variant."""

    id: str
    name: str
    price: float
    discount_price: float | None
    in_stock: bool
    stock_quantity: int
    image: str | None
    attributes: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, variant: Variant) -> "VariantSnapshot":
        return cls(
            id=str(variant.id),
            name=variant.name,
            price=variant.price,
            discount_price=variant.discount_price,
            in_stock=variant.in_stock,
            stock_quantity=variant.stock_quantity,
            image=variant.image,
            attributes=tuple((a.name, a.value) for a in variant.attributes),
        )


@dataclass
class CartEntry:
    """A cart line."""

    product: ProductSnapshot
    variant: VariantSnapshot | None
    quantity: int = 1

    @property
    def key(self) -> CartKey:
        return (self.product.id, self.variant.id if self.variant else None)

    @property
    def available_stock(self) -> int | None:
        """Known stock limit for this line, None when unknown."""
        stock = self.variant.stock_quantity if self.variant else self.product.stock_quantity
        return stock if stock > 0 else None

    @property
    def unit_price(self) -> float:
        if self.variant:
            return effective_price(self.variant.price, self.variant.discount_price)
        return effective_price(self.product.price, self.product.discount_price)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product.id,
            "variant_id": self.variant.id if self.variant else None,
            "name": self.product.name,
            "variant_name": self.variant.name if self.variant else None,
            "slug": self.product.slug,
            "image": (self.variant.image if self.variant and self.variant.image else self.product.image),
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


def clamp_quantity(quantity: int, available: int | None) -> int:
    """Clamp a quantity to at least 1 and, when stock is known, at most stock."""
    quantity = max(1, quantity)
    if available is not None:
        quantity = min(quantity, available)
    return quantity


@dataclass
class Cart:
    """A session cart keyed by (product id, variant id)."""

    _entries: dict[CartKey, CartEntry] = field(default_factory=dict)

    @property
    def entries(self) -> list[CartEntry]:
        return list(self._entries.values())

    def add(self, product: Product, variant: Variant | None = None, quantity: int = 1) -> CartEntry:
        """Add a product (and optional variant) to the cart.

        Adding an existing key increments its quantity. The resulting
        quantity is clamped to [1, available stock].
        """
        product_snapshot = ProductSnapshot.of(product)
        variant_snapshot = VariantSnapshot.of(variant) if variant else None
        key: CartKey = (product_snapshot.id, variant_snapshot.id if variant_snapshot else None)

        entry = self._entries.get(key)
        if entry is None:
            entry = CartEntry(product=product_snapshot, variant=variant_snapshot, quantity=0)
            self._entries[key] = entry
        else:
            entry.product = product_snapshot
            entry.variant = variant_snapshot

        entry.quantity = clamp_quantity(entry.quantity + quantity, entry.available_stock)
        logger.debug("Cart item added", product_id=key[0], variant_id=key[1], quantity=entry.quantity)
        return entry

    def update_quantity(self, product_id: str, quantity: int, variant_id: str | None = None) -> CartEntry | None:
        """Set a line's quantity; zero or less removes the line.

        Returns:
            The updated entry, or None if it was removed.

        Raises:
            CartItemNotFoundError: If the line does not exist.
        """
        key: CartKey = (product_id, variant_id)
        entry = self._entries.get(key)
        if entry is None:
            raise CartItemNotFoundError(product_id, variant_id)
        if quantity <= 0:
            del self._entries[key]
            return None
        entry.quantity = clamp_quantity(quantity, entry.available_stock)
        return entry

    def remove(self, product_id: str, variant_id: str | None = None) -> bool:
        return self._entries.pop((product_id, variant_id), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    @property
    def total(self) -> float:
        return sum(entry.line_total for entry in self._entries.values())

    @property
    def item_count(self) -> int:
        return sum(entry.quantity for entry in self._entries.values())
