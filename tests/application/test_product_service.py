"""Tests for the product service."""

from pathlib import Path

import pytest

from storefront.application.product_service import (
    MediaChanges,
    ProductInput,
    ProductQuery,
    ProductService,
)
from storefront.domain.entities import Variant
from storefront.domain.exceptions import (
    DiscountExceedsPriceError,
    DuplicateSlugError,
    InvalidVariantError,
    MediaValidationError,
    MissingFieldError,
    ProductNotFoundError,
    UnknownCategoryError,
    ValidationError,
)
from storefront.domain.value_objects import (
    Attribute,
    PendingVariantId,
    PersistedVariantId,
    VariantAttribute,
)
from storefront.infrastructure.document_store import InMemoryDocumentStore
from storefront.infrastructure.media import MediaStorage, MediaUpload


def png(name: str = "photo.png") -> MediaUpload:
    return MediaUpload(filename=name, content_type="image/png", data=b"\x89PNG image")


def stored_path(media: MediaStorage, url: str) -> Path:
    return media.upload_dir / url.removeprefix("/uploads/")


def product_input(**overrides) -> ProductInput:
    fields = {
        "name": "Desk Lamp",
        "description": "Warm LED desk lamp",
        "price": 40.0,
        "categories": ["c-electronics"],
        "in_stock": True,
        "stock_quantity": 10,
    }
    fields.update(overrides)
    return ProductInput(**fields)


def color_variant(variant_id, color: str, price: float = 25.0) -> Variant:
    return Variant(
        id=variant_id,
        name=color,
        price=price,
        stock_quantity=3,
        attributes=[VariantAttribute(name="Color", value=color)],
    )


COLOR = [Attribute(name="Color", values=("Red", "Blue"))]


@pytest.fixture
def service(store: InMemoryDocumentStore, media: MediaStorage, catalog: dict) -> ProductService:
    return ProductService(store, media)


class TestCreateProduct:
    """Tests for ProductService.create."""

    @pytest.mark.asyncio
    async def test_create_simple_product(self, service: ProductService, media: MediaStorage) -> None:
        product = await service.create(product_input(), MediaChanges(main_image=png()))

        assert product.slug == "desk-lamp"
        assert product.type == "simple"
        assert product.variants == []
        assert product.image.startswith("/uploads/")
        assert stored_path(media, product.image).exists()
        assert (await service.get(product.id)).name == "Desk Lamp"

    @pytest.mark.asyncio
    async def test_create_with_image_url(self, service: ProductService) -> None:
        product = await service.create(product_input(image_url="https://cdn.example.com/lamp.png"))
        assert product.image == "https://cdn.example.com/lamp.png"

    @pytest.mark.asyncio
    async def test_main_image_required(self, service: ProductService) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            await service.create(product_input())
        assert exc_info.value.details["fields"] == ["mainImage"]

    @pytest.mark.asyncio
    async def test_invalid_main_image_rejected(self, service: ProductService) -> None:
        bad = MediaUpload(filename="lamp.txt", content_type="text/plain", data=b"x")
        with pytest.raises(MediaValidationError):
            await service.create(product_input(), MediaChanges(main_image=bad))

    @pytest.mark.asyncio
    async def test_required_fields(self, service: ProductService) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            await service.create(product_input(name=" ", categories=[]), MediaChanges(main_image=png()))
        assert exc_info.value.details["fields"] == ["name", "categories"]

    @pytest.mark.asyncio
    async def test_unknown_category(self, service: ProductService) -> None:
        with pytest.raises(UnknownCategoryError):
            await service.create(product_input(categories=["nope"]), MediaChanges(main_image=png()))

    @pytest.mark.asyncio
    async def test_negative_price(self, service: ProductService) -> None:
        with pytest.raises(ValidationError):
            await service.create(product_input(price=-1), MediaChanges(main_image=png()))

    @pytest.mark.asyncio
    async def test_discount_above_price(self, service: ProductService) -> None:
        with pytest.raises(DiscountExceedsPriceError):
            await service.create(product_input(discount_price=50.0), MediaChanges(main_image=png()))

    @pytest.mark.asyncio
    async def test_duplicate_slug(self, service: ProductService) -> None:
        with pytest.raises(DuplicateSlugError):
            await service.create(product_input(name="Ultra Laptop"), MediaChanges(main_image=png()))

    @pytest.mark.asyncio
    async def test_variable_product_needs_variants(self, service: ProductService) -> None:
        with pytest.raises(MissingFieldError, match="at least one variation"):
            await service.create(
                product_input(type="variable", attributes=COLOR),
                MediaChanges(main_image=png()),
            )

    @pytest.mark.asyncio
    async def test_variable_product_gets_persisted_variant_ids(self, service: ProductService) -> None:
        """Pending ids from the form are replaced on save."""
        data = product_input(
            type="variable",
            attributes=COLOR,
            variants=[
                color_variant(PendingVariantId(client_id="tmp-1"), "Red"),
                color_variant(PendingVariantId(client_id="tmp-2"), "Blue"),
            ],
        )
        product = await service.create(data, MediaChanges(main_image=png()))

        assert len(product.variants) == 2
        assert all(isinstance(v.id, PersistedVariantId) for v in product.variants)
        assert {str(v.id) for v in product.variants}.isdisjoint({"tmp-1", "tmp-2"})
        assert product.price_range() == (25.0, 25.0)

    @pytest.mark.asyncio
    async def test_invalid_variant(self, service: ProductService) -> None:
        data = product_input(
            type="variable",
            attributes=COLOR,
            variants=[color_variant(PendingVariantId(client_id="tmp-1"), "Green")],
        )
        with pytest.raises(InvalidVariantError):
            await service.create(data, MediaChanges(main_image=png()))

    @pytest.mark.asyncio
    async def test_bad_optional_media_is_skipped(self, service: ProductService) -> None:
        """Rejected additional media and variant images do not fail the save."""
        data = product_input(
            type="variable",
            attributes=COLOR,
            variants=[color_variant(PendingVariantId(client_id="tmp-1"), "Red")],
        )
        changes = MediaChanges(
            main_image=png(),
            media_files=[
                png("extra.png"),
                MediaUpload(filename="notes.txt", content_type="text/plain", data=b"x"),
                MediaUpload(filename="clip.mp4", content_type="video/mp4", data=b"video"),
            ],
            variant_images={
                0: MediaUpload(filename="red.exe", content_type="image/png", data=b"x"),
                5: png("orphan.png"),
            },
        )
        product = await service.create(data, changes)

        assert [m.type for m in product.additional_media] == ["image", "video"]
        assert product.variants[0].image is None

    @pytest.mark.asyncio
    async def test_preview_variants(self, service: ProductService) -> None:
        variants = service.preview_variants(
            [Attribute(name="Color", values=("Red", "Blue")), Attribute(name="Size", values=("S", "M", "L"))],
            price=20,
        )
        assert len(variants) == 6
        assert variants[0].name == "Red - S"


class TestUpdateProduct:
    """Tests for ProductService.update media reconciliation."""

    @pytest.mark.asyncio
    async def test_replacing_main_image_deletes_old_file(
        self, service: ProductService, media: MediaStorage
    ) -> None:
        product = await service.create(product_input(), MediaChanges(main_image=png("old.png")))
        old_path = stored_path(media, product.image)

        updated = await service.update(product.id, product_input(), MediaChanges(main_image=png("new.png")))

        assert updated.image != product.image
        assert not old_path.exists()
        assert stored_path(media, updated.image).exists()

    @pytest.mark.asyncio
    async def test_removing_additional_media_deletes_file(
        self, service: ProductService, media: MediaStorage
    ) -> None:
        product = await service.create(
            product_input(),
            MediaChanges(main_image=png(), media_files=[png("a.png"), png("b.png")]),
        )
        removed, kept = product.additional_media

        updated = await service.update(
            product.id, product_input(), MediaChanges(media_to_remove=[removed.url])
        )

        assert [m.url for m in updated.additional_media] == [kept.url]
        assert not stored_path(media, removed.url).exists()
        assert stored_path(media, kept.url).exists()
        assert stored_path(media, updated.image).exists()

    @pytest.mark.asyncio
    async def test_existing_variant_ids_are_kept(self, service: ProductService) -> None:
        """Submitted ids that match stored variants stay; unknown ids become new variants."""
        existing = await service.get("p-shirt")
        data = product_input(
            name="Cotton Shirt",
            type="variable",
            attributes=COLOR,
            image_url="https://cdn.example.com/shirt.png",
            variants=[
                color_variant(PendingVariantId(client_id="v-red"), "Red"),
                color_variant(PendingVariantId(client_id="unknown"), "Blue"),
            ],
        )
        updated = await service.update(existing.id, data)

        ids = [str(v.id) for v in updated.variants]
        assert ids[0] == "v-red"
        assert ids[1] not in {"unknown", "v-blue"}
        assert updated.slug == "cotton-shirt"

    @pytest.mark.asyncio
    async def test_switching_to_simple_drops_variants(self, service: ProductService) -> None:
        updated = await service.update(
            "p-shirt",
            product_input(name="Cotton Shirt", image_url="https://cdn.example.com/shirt.png"),
        )
        assert updated.type == "simple"
        assert updated.variants == []

    @pytest.mark.asyncio
    async def test_update_missing(self, service: ProductService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.update("missing", product_input())


class TestDeleteProduct:
    """Tests for ProductService.delete."""

    @pytest.mark.asyncio
    async def test_delete_removes_all_managed_media(
        self, service: ProductService, media: MediaStorage
    ) -> None:
        product = await service.create(
            product_input(), MediaChanges(main_image=png(), media_files=[png("a.png")])
        )
        paths = [stored_path(media, product.image), stored_path(media, product.additional_media[0].url)]

        await service.delete(product.id)

        assert not any(path.exists() for path in paths)
        with pytest.raises(ProductNotFoundError):
            await service.get(product.id)

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: ProductService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.delete("missing")


class TestPublicQueries:
    """Tests for the public product queries."""

    @pytest.mark.asyncio
    async def test_detail_resolves_category_names(self, service: ProductService) -> None:
        detail = await service.get_detail("ultra-laptop")
        assert detail.category_names == ["Electronics", "Laptops"]

    @pytest.mark.asyncio
    async def test_detail_missing(self, service: ProductService) -> None:
        with pytest.raises(ProductNotFoundError):
            await service.get_detail("nope")

    @pytest.mark.asyncio
    async def test_list_filters_by_category_slug_or_name(self, service: ProductService) -> None:
        by_slug = await service.list_public(ProductQuery(categories=["laptops"]))
        by_name = await service.list_public(ProductQuery(categories=["Books"]))
        assert [p.id for p in by_slug.items] == ["p-laptop"]
        assert [p.id for p in by_name.items] == ["p-novel"]

    @pytest.mark.asyncio
    async def test_list_flags(self, service: ProductService) -> None:
        featured = await service.list_public(ProductQuery(featured=True))
        offers = await service.list_public(ProductQuery(today_offer=True))
        out_of_stock = await service.list_public(ProductQuery(in_stock=False))
        assert [p.id for p in featured.items] == ["p-laptop"]
        assert [p.id for p in offers.items] == ["p-shirt"]
        assert [p.id for p in out_of_stock.items] == ["p-novel"]

    @pytest.mark.asyncio
    async def test_pagination(self, service: ProductService) -> None:
        page = await service.list_public(page=2, limit=2)
        assert page.total == 3
        assert len(page.items) == 1
        assert page.total_pages == 2
        assert page.has_prev and not page.has_next

    @pytest.mark.asyncio
    async def test_similar_shares_category_and_is_in_stock(self, service: ProductService) -> None:
        similar = await service.similar("cotton-shirt")
        assert [p.id for p in similar] == ["p-laptop"]

    @pytest.mark.asyncio
    async def test_similar_excludes_out_of_stock(self, service: ProductService) -> None:
        assert await service.similar("mystery-novel") == []
