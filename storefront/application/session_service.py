"""Session state service.

Carts and comparison sets are explicit per-session objects held in an
in-memory registry keyed by the client's session id. They live until the
client clears them or the process restarts.
"""

import structlog

from storefront.catalog.repository import ProductRepository
from storefront.domain.cart import Cart, CartEntry
from storefront.domain.comparison import AddResult, ComparisonSet
from storefront.domain.exceptions import (
    OutOfStockError,
    ProductNotFoundError,
    VariantNotFoundError,
    VariantRequiredError,
)
from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import DocumentStore, get_document_store

logger = structlog.get_logger()


# ============================================================================
# In-Memory Registry
# ============================================================================


class SessionRegistry:
    """In-memory registry of session carts and comparison sets."""

    def __init__(self, comparison_capacity: int | None = None) -> None:
        self.comparison_capacity = comparison_capacity or settings.comparison_capacity
        self._carts: dict[str, Cart] = {}
        self._comparisons: dict[str, ComparisonSet] = {}

    def cart(self, session_id: str) -> Cart:
        """Get or create the cart for a session."""
        if session_id not in self._carts:
            self._carts[session_id] = Cart()
        return self._carts[session_id]

    def comparison(self, session_id: str) -> ComparisonSet:
        """Get or create the comparison set for a session."""
        if session_id not in self._comparisons:
            self._comparisons[session_id] = ComparisonSet(capacity=self.comparison_capacity)
        return self._comparisons[session_id]

    def reset(self) -> None:
        self._carts.clear()
        self._comparisons.clear()


# Global registry instance
_registry: SessionRegistry | None = None


def get_session_registry() -> SessionRegistry:
    """Get session registry singleton."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


# ============================================================================
# Service
# ============================================================================


class SessionService:
    """Cart and comparison operations for one session."""

    def __init__(
        self,
        session_id: str,
        store: DocumentStore | None = None,
        registry: SessionRegistry | None = None,
    ) -> None:
        self.session_id = session_id
        self.store = store or get_document_store()
        self.registry = registry or get_session_registry()
        self.products = ProductRepository(self.store)

    @property
    def cart(self) -> Cart:
        return self.registry.cart(self.session_id)

    @property
    def comparison(self) -> ComparisonSet:
        return self.registry.comparison(self.session_id)

    async def add_to_cart(
        self,
        product_id: str,
        variant_id: str | None = None,
        quantity: int = 1,
    ) -> CartEntry:
        """Add a product, or one of its variants, to the cart.

        Raises:
            ProductNotFoundError: If the product does not exist.
            VariantRequiredError: If a variable product is added without a variant.
            VariantNotFoundError: If the variant does not exist.
            OutOfStockError: If the product or variant is out of stock.
        """
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        variant = None
        if variant_id:
            variant = product.get_variant(variant_id)
            if variant is None:
                raise VariantNotFoundError(product_id, variant_id)
            if not variant.in_stock:
                raise OutOfStockError(product_id, variant_id)
        elif product.type == "variable" and product.variants:
            raise VariantRequiredError(product_id)

        if not product.in_stock:
            raise OutOfStockError(product_id, variant_id)

        entry = self.cart.add(product, variant, quantity)
        logger.info(
            "Added to cart",
            session_id=self.session_id,
            product_id=product_id,
            variant_id=variant_id,
            quantity=entry.quantity,
        )
        return entry

    def update_cart_quantity(
        self,
        product_id: str,
        quantity: int,
        variant_id: str | None = None,
    ) -> CartEntry | None:
        return self.cart.update_quantity(product_id, quantity, variant_id)

    def remove_from_cart(self, product_id: str, variant_id: str | None = None) -> bool:
        return self.cart.remove(product_id, variant_id)

    def clear_cart(self) -> None:
        self.cart.clear()
        logger.info("Cart cleared", session_id=self.session_id)

    async def add_to_comparison(self, product_id: str) -> AddResult:
        """Add a product to the comparison set.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        result = self.comparison.add(product)
        if result.warning:
            logger.info(
                "Comparison add rejected",
                session_id=self.session_id,
                product_id=product_id,
                outcome=result.outcome.value,
            )
        return result

    def remove_from_comparison(self, product_id: str) -> None:
        self.comparison.remove(product_id)

    def clear_comparison(self) -> None:
        self.comparison.clear()
