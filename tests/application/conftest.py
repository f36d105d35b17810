"""Fixtures for application service tests."""

from pathlib import Path

import pytest
import pytest_asyncio

from storefront.application.session_service import SessionRegistry
from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.domain.entities import Category, Product, Variant
from storefront.domain.value_objects import Attribute, PersistedVariantId, VariantAttribute
from storefront.infrastructure.document_store import InMemoryDocumentStore
from storefront.infrastructure.media import MediaStorage


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def media(tmp_path: Path) -> MediaStorage:
    return MediaStorage(upload_dir=tmp_path / "uploads", url_prefix="/uploads")


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry(comparison_capacity=4)


@pytest_asyncio.fixture
async def catalog(store: InMemoryDocumentStore) -> dict[str, Category | Product]:
    """Electronics > Laptops, plus Books, with three products.

    - ``laptop``: simple, in stock, in Electronics and Laptops
    - ``shirt``: variable with Red/Blue variants, in Electronics
    - ``novel``: simple, out of stock, in Books
    """
    categories = CategoryRepository(store)
    products = ProductRepository(store)

    electronics = Category(id="c-electronics", name="Electronics", slug="electronics")
    laptops = Category(id="c-laptops", name="Laptops", slug="laptops", parent_id="c-electronics")
    books = Category(id="c-books", name="Books", slug="books")
    for category in (electronics, laptops, books):
        await categories.save(category)

    laptop = Product(
        id="p-laptop",
        name="Ultra Laptop",
        slug="ultra-laptop",
        description="A thin and light laptop",
        price=1200.0,
        discount_price=999.0,
        categories=["c-electronics", "c-laptops"],
        image="https://cdn.example.com/laptop.png",
        stock_quantity=3,
        featured=True,
    )
    shirt = Product(
        id="p-shirt",
        name="Cotton Shirt",
        slug="cotton-shirt",
        description="Soft cotton shirt",
        price=30.0,
        type="variable",
        categories=["c-electronics"],
        attributes=[Attribute(name="Color", values=("Red", "Blue"))],
        variants=[
            Variant(
                id=PersistedVariantId(id="v-red"),
                name="Red",
                price=30.0,
                stock_quantity=5,
                attributes=[VariantAttribute(name="Color", value="Red")],
            ),
            Variant(
                id=PersistedVariantId(id="v-blue"),
                name="Blue",
                price=30.0,
                in_stock=False,
                attributes=[VariantAttribute(name="Color", value="Blue")],
            ),
        ],
        today_offer=True,
    )
    novel = Product(
        id="p-novel",
        name="Mystery Novel",
        slug="mystery-novel",
        description="A page-turner",
        price=15.0,
        categories=["c-books"],
        in_stock=False,
    )
    for product in (laptop, shirt, novel):
        await products.save(product)

    return {
        "electronics": electronics,
        "laptops": laptops,
        "books": books,
        "laptop": laptop,
        "shirt": shirt,
        "novel": novel,
    }
