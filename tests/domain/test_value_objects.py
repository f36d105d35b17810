"""Tests for domain value objects and helpers."""

import pytest

from storefront.domain.value_objects import (
    Attribute,
    Dimensions,
    MediaItem,
    PendingVariantId,
    PersistedVariantId,
    effective_price,
    slugify,
    variant_id_from_dict,
    variant_id_to_dict,
)


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Gaming Laptops", "gaming-laptops"),
            ("  Men's Shoes  ", "mens-shoes"),
            ("Audio & Video", "audio-video"),
            ("snake_case--name", "snake-case-name"),
        ],
    )
    def test_slugify(self, name: str, expected: str) -> None:
        assert slugify(name) == expected

    def test_punctuation_only_gives_empty_slug(self) -> None:
        assert slugify("!!!") == ""


class TestEffectivePrice:
    """Tests for effective_price."""

    def test_discount_wins_when_set(self) -> None:
        assert effective_price(100, 20) == 20

    def test_list_price_without_discount(self) -> None:
        assert effective_price(100, None) == 100

    def test_zero_discount_is_ignored(self) -> None:
        """A zero discount means no discount."""
        assert effective_price(100, 0) == 100


class TestVariantIds:
    """Tests for the pending/persisted variant id union."""

    def test_pending_is_not_persisted(self) -> None:
        variant_id = PendingVariantId.generate()
        assert not variant_id.is_persisted
        assert str(variant_id) == variant_id.client_id

    def test_persisted(self) -> None:
        variant_id = PersistedVariantId(id="abc")
        assert variant_id.is_persisted
        assert str(variant_id) == "abc"

    def test_tagged_dict_round_trip(self) -> None:
        persisted = PersistedVariantId(id="v-1")
        pending = PendingVariantId(client_id="tmp-1")
        assert variant_id_from_dict(variant_id_to_dict(persisted)) == persisted
        assert variant_id_from_dict(variant_id_to_dict(pending)) == pending

    def test_same_string_different_kind_are_not_equal(self) -> None:
        assert PendingVariantId(client_id="x") != PersistedVariantId(id="x")

    def test_malformed_dict_gives_fresh_pending(self) -> None:
        assert isinstance(variant_id_from_dict(None), PendingVariantId)
        assert isinstance(variant_id_from_dict({"kind": "persisted"}), PendingVariantId)


class TestCatalogValues:
    """Tests for small catalog value objects."""

    def test_value_objects_are_immutable(self) -> None:
        attribute = Attribute(name="Color", values=("Red",))
        with pytest.raises(AttributeError):
            attribute.name = "Size"  # type: ignore[misc]

    def test_media_item_accepts_camel_case_mime(self) -> None:
        item = MediaItem.from_dict({"url": "/uploads/a.png", "mimeType": "image/png"})
        assert item.mime_type == "image/png"
        assert item.type == "image"

    def test_dimensions_default_to_zero(self) -> None:
        assert Dimensions.from_dict(None) == Dimensions(0, 0, 0)
