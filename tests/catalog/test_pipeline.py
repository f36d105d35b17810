"""Tests for the catalog filter and sort pipeline."""

import pytest

from storefront.catalog.pipeline import (
    FilterCriteria,
    SortField,
    SortOrder,
    apply,
    filter_products,
    sort_products,
)
from storefront.domain.entities import Product


def make_product(product_id: str, **fields) -> Product:
    fields.setdefault("name", f"Product {product_id}")
    fields.setdefault("price", 10.0)
    return Product(id=product_id, **fields)


@pytest.fixture
def products() -> list[Product]:
    return [
        make_product("1", name="Desk Lamp", price=10, categories=["home"], rating=4.0),
        make_product("2", name="armchair", price=50, categories=["home"], featured=True, rating=4.5),
        make_product("3", name="Laptop", price=99, categories=["laptops"], in_stock=False),
        make_product("4", name="Headphones", price=100, discount_price=20, categories=["audio"], today_offer=True),
    ]


class TestFilterProducts:
    """Tests for filter_products."""

    def test_price_range_is_inclusive_on_effective_price(self, products: list[Product]) -> None:
        """A discounted product is filtered by its discount price."""
        result = filter_products(products, FilterCriteria(price_range=(20, 99)))
        assert [p.id for p in result] == ["2", "3", "4"]

    def test_price_range_drops_out_of_range(self, products: list[Product]) -> None:
        result = filter_products(products, FilterCriteria(price_range=(20, 100)))
        assert "1" not in [p.id for p in result]

    def test_category_match_is_case_insensitive(self, products: list[Product]) -> None:
        result = filter_products(products, FilterCriteria(category_ids=["HOME", "audio"]))
        assert [p.id for p in result] == ["1", "2", "4"]

    def test_flags_compose_with_and(self, products: list[Product]) -> None:
        criteria = FilterCriteria(category_ids=["home"], featured_only=True)
        assert [p.id for p in filter_products(products, criteria)] == ["2"]

    def test_in_stock_only(self, products: list[Product]) -> None:
        result = filter_products(products, FilterCriteria(in_stock_only=True))
        assert "3" not in [p.id for p in result]

    def test_offer_only(self, products: list[Product]) -> None:
        result = filter_products(products, FilterCriteria(offer_only=True))
        assert [p.id for p in result] == ["4"]

    def test_empty_criteria_keeps_everything(self, products: list[Product]) -> None:
        assert FilterCriteria().is_empty
        assert len(filter_products(products, FilterCriteria())) == 4


class TestSortProducts:
    """Tests for sort_products."""

    def test_sort_by_effective_price(self) -> None:
        """A 100 list price discounted to 20 sorts before a plain 50."""
        items = [
            make_product("a", price=50),
            make_product("b", price=100, discount_price=20),
        ]
        result = sort_products(items, SortField.PRICE, SortOrder.ASC)
        assert [p.id for p in result] == ["b", "a"]

    def test_sort_by_name_ignores_case(self, products: list[Product]) -> None:
        result = sort_products(products, "name", "asc")
        assert [p.name for p in result] == ["armchair", "Desk Lamp", "Headphones", "Laptop"]

    def test_descending(self, products: list[Product]) -> None:
        result = sort_products(products, SortField.RATING, SortOrder.DESC)
        assert [p.id for p in result][:2] == ["2", "1"]

    def test_stable_for_equal_keys(self) -> None:
        """Equal keys keep input order in both directions."""
        items = [make_product(str(i), price=5) for i in range(5)]
        assert [p.id for p in sort_products(items, "price", "asc")] == ["0", "1", "2", "3", "4"]
        assert [p.id for p in sort_products(items, "price", "desc")] == ["0", "1", "2", "3", "4"]

    def test_unknown_field_falls_back_to_name(self, products: list[Product]) -> None:
        result = sort_products(products, "popularity", "sideways")
        assert [p.name for p in result][0] == "armchair"


class TestApply:
    """Tests for the combined pipeline."""

    def test_none_input_gives_empty_list(self) -> None:
        assert apply(None) == []

    def test_non_list_input_gives_empty_list(self) -> None:
        assert apply("not a list") == []  # type: ignore[arg-type]

    def test_filter_then_sort(self, products: list[Product]) -> None:
        result = apply(products, FilterCriteria(price_range=(0, 60)), "price", "desc")
        assert [p.id for p in result] == ["2", "4", "1"]

    def test_does_not_mutate_input(self, products: list[Product]) -> None:
        before = [p.id for p in products]
        apply(products, FilterCriteria(in_stock_only=True), "price", "desc")
        assert [p.id for p in products] == before
