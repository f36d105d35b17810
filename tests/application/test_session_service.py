"""Tests for per-session cart and comparison operations."""

import pytest

from storefront.application.session_service import SessionRegistry, SessionService
from storefront.domain.comparison import AddOutcome
from storefront.domain.exceptions import (
    CartItemNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
    VariantNotFoundError,
    VariantRequiredError,
)
from storefront.infrastructure.document_store import InMemoryDocumentStore


@pytest.fixture
def session(store: InMemoryDocumentStore, registry: SessionRegistry, catalog: dict) -> SessionService:
    return SessionService("session-a", store, registry)


class TestCart:
    """Tests for cart operations."""

    @pytest.mark.asyncio
    async def test_add_simple_product(self, session: SessionService) -> None:
        entry = await session.add_to_cart("p-laptop", quantity=2)
        assert entry.unit_price == 999.0
        assert session.cart.total == 1998.0

    @pytest.mark.asyncio
    async def test_quantity_clamped_to_stock(self, session: SessionService) -> None:
        entry = await session.add_to_cart("p-laptop", quantity=10)
        assert entry.quantity == 3

    @pytest.mark.asyncio
    async def test_add_variant(self, session: SessionService) -> None:
        entry = await session.add_to_cart("p-shirt", variant_id="v-red")
        assert entry.key == ("p-shirt", "v-red")

    @pytest.mark.asyncio
    async def test_variable_product_requires_variant(self, session: SessionService) -> None:
        with pytest.raises(VariantRequiredError):
            await session.add_to_cart("p-shirt")

    @pytest.mark.asyncio
    async def test_unknown_variant(self, session: SessionService) -> None:
        with pytest.raises(VariantNotFoundError):
            await session.add_to_cart("p-shirt", variant_id="v-green")

    @pytest.mark.asyncio
    async def test_out_of_stock_variant(self, session: SessionService) -> None:
        with pytest.raises(OutOfStockError):
            await session.add_to_cart("p-shirt", variant_id="v-blue")

    @pytest.mark.asyncio
    async def test_out_of_stock_product(self, session: SessionService) -> None:
        with pytest.raises(OutOfStockError):
            await session.add_to_cart("p-novel")

    @pytest.mark.asyncio
    async def test_unknown_product(self, session: SessionService) -> None:
        with pytest.raises(ProductNotFoundError):
            await session.add_to_cart("nope")

    @pytest.mark.asyncio
    async def test_update_remove_and_clear(self, session: SessionService) -> None:
        await session.add_to_cart("p-laptop")
        await session.add_to_cart("p-shirt", variant_id="v-red")

        entry = session.update_cart_quantity("p-shirt", 4, variant_id="v-red")
        assert entry is not None and entry.quantity == 4
        assert session.remove_from_cart("p-laptop") is True
        assert session.cart.item_count == 4

        session.clear_cart()
        assert session.cart.entries == []
        with pytest.raises(CartItemNotFoundError):
            session.update_cart_quantity("p-shirt", 1, variant_id="v-red")

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(
        self, store: InMemoryDocumentStore, registry: SessionRegistry, session: SessionService
    ) -> None:
        await session.add_to_cart("p-laptop")
        other = SessionService("session-b", store, registry)
        assert other.cart.entries == []
        assert SessionService("session-a", store, registry).cart.item_count == 1


class TestComparison:
    """Tests for comparison operations."""

    @pytest.mark.asyncio
    async def test_add_and_remove(self, session: SessionService) -> None:
        result = await session.add_to_comparison("p-laptop")
        assert result.added
        assert (await session.add_to_comparison("p-laptop")).outcome is AddOutcome.ALREADY_PRESENT

        session.remove_from_comparison("p-laptop")
        assert len(session.comparison) == 0

    @pytest.mark.asyncio
    async def test_capacity_warning(self, store: InMemoryDocumentStore, catalog: dict) -> None:
        session = SessionService("small", store, SessionRegistry(comparison_capacity=2))
        await session.add_to_comparison("p-laptop")
        await session.add_to_comparison("p-shirt")

        result = await session.add_to_comparison("p-novel")

        assert result.outcome is AddOutcome.CAPACITY_REACHED
        assert result.warning
        assert [p.id for p in session.comparison.products] == ["p-laptop", "p-shirt"]

    @pytest.mark.asyncio
    async def test_unknown_product(self, session: SessionService) -> None:
        with pytest.raises(ProductNotFoundError):
            await session.add_to_comparison("nope")

    @pytest.mark.asyncio
    async def test_clear(self, session: SessionService) -> None:
        await session.add_to_comparison("p-laptop")
        session.clear_comparison()
        assert session.comparison.can_add_more
        assert len(session.comparison) == 0
