"""Product application service.

Handles product creation and editing from the admin form, media
reconciliation on disk, and the public product queries.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, Literal, TypeVar

import structlog

from storefront.catalog.repository import CategoryRepository, ProductRepository
from storefront.catalog.taxonomy import CategoryTree
from storefront.catalog.variants import (
    assign_persisted_ids,
    generate_variants,
    validate_attributes,
    validate_variants,
)
from storefront.domain.entities import Product, Variant
from storefront.domain.exceptions import (
    DiscountExceedsPriceError,
    DuplicateSlugError,
    MediaValidationError,
    MissingFieldError,
    ProductNotFoundError,
    UnknownCategoryError,
    ValidationError,
)
from storefront.domain.value_objects import (
    Attribute,
    Dimensions,
    MediaItem,
    PendingVariantId,
    PersistedVariantId,
    Specification,
    slugify,
)
from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import (
    DocumentStore,
    get_document_store,
    new_document_id,
)
from storefront.infrastructure.media import MediaStorage, MediaUpload, get_media_storage

logger = structlog.get_logger()

T = TypeVar("T")


# ============================================================================
# Inputs and Results
# ============================================================================


@dataclass
class ProductInput:
    """Product fields submitted by the admin form."""

    name: str
    description: str
    price: float
    categories: list[str]
    discount_price: float | None = None
    type: Literal["simple", "variable"] = "simple"
    image_url: str | None = None
    sku: str = ""
    brand: str = ""
    in_stock: bool = False
    stock_quantity: int = 0
    rating: float = 0
    weight: float = 0
    dimensions: Dimensions = field(default_factory=Dimensions)
    shipping_class: str = ""
    has_guarantee: bool = False
    has_referral: bool = False
    has_exchange: bool = False
    seo_title: str = ""
    seo_description: str = ""
    attributes: list[Attribute] = field(default_factory=list)
    specifications: list[Specification] = field(default_factory=list)
    variants: list[Variant] = field(default_factory=list)
    today_offer: bool = False
    featured: bool = False


@dataclass
class MediaChanges:
    """Files submitted alongside a product form.

    Attributes:
        main_image: Replacement main image.
        media_files: Additional images and videos to append.
        media_to_remove: URLs of additional media to drop.
        variant_images: Variant image uploads keyed by variant index.
    """

    main_image: MediaUpload | None = None
    media_files: list[MediaUpload] = field(default_factory=list)
    media_to_remove: list[str] = field(default_factory=list)
    variant_images: dict[int, MediaUpload] = field(default_factory=dict)


@dataclass
class ProductQuery:
    """Public listing filters.

    Category identifiers may be ids, slugs or names. Tri-state flags
    filter only when set.
    """

    categories: list[str] = field(default_factory=list)
    featured: bool | None = None
    today_offer: bool | None = None
    in_stock: bool | None = None


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1


@dataclass
class ProductDetail:
    """A product with its category names resolved."""

    product: Product
    category_names: list[str]


# ============================================================================
# Service
# ============================================================================


class ProductService:
    """Service for product operations.

    Example usage:
        service = ProductService()
        product = await service.create(ProductInput(...), MediaChanges(main_image=upload))
        page = await service.list_public(ProductQuery(featured=True), page=1, limit=20)
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        media: MediaStorage | None = None,
    ) -> None:
        self.store = store or get_document_store()
        self.media = media or get_media_storage()
        self.products = ProductRepository(self.store)
        self.categories = CategoryRepository(self.store)

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def list_all(self) -> list[Product]:
        """All products, newest first."""
        return await self.products.list_all()

    async def get(self, product_id: str) -> Product:
        """Get a product by id.

        Raises:
            ProductNotFoundError: If it does not exist.
        """
        product = await self.products.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def preview_variants(
        self,
        attributes: list[Attribute],
        price: float = 0,
        discount_price: float | None = None,
    ) -> list[Variant]:
        """Generate the variant matrix for unsaved attributes."""
        return generate_variants(attributes, price=price, discount_price=discount_price)

    async def create(self, data: ProductInput, changes: MediaChanges | None = None) -> Product:
        """Create a product from form data.

        Raises:
            ValidationError: If any field or upload is rejected.
            DuplicateSlugError: If another product has the same slug.
        """
        changes = changes or MediaChanges()
        await self._validate(data)

        if changes.main_image is not None:
            self.media.validate(changes.main_image, "image")
        elif not data.image_url:
            raise MissingFieldError("Main image is required", ["mainImage"])

        product_id = new_document_id()
        slug = await self._unique_slug(data.name, product_id)

        variants = self._prepare_variants(data, existing=None)
        self._apply_variant_images(variants, changes.variant_images)

        image = (
            self.media.save(changes.main_image)
            if changes.main_image is not None
            else data.image_url or ""
        )

        product = Product(id=product_id, slug=slug, image=image, variants=variants)
        self._apply_fields(product, data)
        product.additional_media = self._save_additional_media(changes.media_files)

        await self.products.save(product)
        logger.info(
            "Product created",
            product_id=product.id,
            slug=product.slug,
            type=product.type,
            variant_count=len(product.variants),
        )
        return product

    async def update(
        self,
        product_id: str,
        data: ProductInput,
        changes: MediaChanges | None = None,
    ) -> Product:
        """Replace a product's fields and reconcile its media.

        Files no longer referenced after the update (replaced main image,
        removed additional media, replaced variant images) are deleted.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ValidationError: If any field or upload is rejected.
        """
        changes = changes or MediaChanges()
        product = await self.get(product_id)
        await self._validate(data)
        if changes.main_image is not None:
            self.media.validate(changes.main_image, "image")

        before = self._referenced_media(product)

        if data.name.strip() != product.name:
            product.slug = await self._unique_slug(data.name, product.id)

        variants = self._prepare_variants(data, existing=product)
        self._apply_variant_images(variants, changes.variant_images)
        product.variants = variants

        if changes.main_image is not None:
            product.image = self.media.save(changes.main_image)
        elif data.image_url:
            product.image = data.image_url

        removed = set(changes.media_to_remove)
        product.additional_media = [
            item for item in product.additional_media if item.url not in removed
        ] + self._save_additional_media(changes.media_files)

        self._apply_fields(product, data)
        product.updated_at = datetime.now(timezone.utc)
        await self.products.save(product)

        stale = before - self._referenced_media(product)
        for url in sorted(stale):
            self.media.delete(url)

        logger.info(
            "Product updated",
            product_id=product.id,
            deleted_media=len(stale),
            variant_count=len(product.variants),
        )
        return product

    async def delete(self, product_id: str) -> None:
        """Delete a product and every media file it references.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self.get(product_id)
        await self.products.delete(product_id)
        for url in sorted(self._referenced_media(product)):
            self.media.delete(url)
        logger.info("Product deleted", product_id=product_id)

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def get_detail(self, slug: str) -> ProductDetail:
        """Get a product by slug with category names.

        Raises:
            ProductNotFoundError: If no product has the slug.
        """
        product = await self.products.get_by_slug(slug)
        if product is None:
            raise ProductNotFoundError(slug)
        tree = CategoryTree(await self.categories.list_all())
        return ProductDetail(
            product=product,
            category_names=[tree.name_of(c) for c in product.categories],
        )

    async def list_public(
        self,
        query: ProductQuery | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResult[Product]:
        """Filtered product listing, newest first, one page at a time."""
        query = query or ProductQuery()
        page = max(page, 1)
        limit = max(limit, 1)
        products = await self.products.list_all()

        if query.categories:
            tree = CategoryTree(await self.categories.list_all())
            wanted = set()
            for identifier in query.categories:
                found = tree.find(identifier)
                wanted.add(found.id if found else identifier)
            products = [p for p in products if wanted.intersection(p.categories)]
        if query.featured:
            products = [p for p in products if p.featured]
        if query.today_offer:
            products = [p for p in products if p.today_offer]
        if query.in_stock is not None:
            products = [p for p in products if p.in_stock == query.in_stock]

        start = (page - 1) * limit
        return PaginatedResult(
            items=products[start:start + limit],
            total=len(products),
            page=page,
            page_size=limit,
        )

    async def similar(self, slug: str, limit: int | None = None) -> list[Product]:
        """In-stock products sharing a category with the given product.

        Raises:
            ProductNotFoundError: If no product has the slug.
        """
        product = await self.products.get_by_slug(slug)
        if product is None:
            raise ProductNotFoundError(slug)
        limit = limit or settings.similar_products_limit
        shared = set(product.categories)
        return [
            p
            for p in await self.products.list_all()
            if p.id != product.id and p.in_stock and shared.intersection(p.categories)
        ][:limit]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _validate(self, data: ProductInput) -> None:
        missing = [
            name
            for name, value in (
                ("name", data.name.strip()),
                ("description", data.description.strip()),
                ("categories", data.categories),
            )
            if not value
        ]
        if missing:
            raise MissingFieldError(
                "Name, description, and at least one category are required", missing
            )

        for category_id in data.categories:
            if await self.categories.get_by_id(category_id) is None:
                raise UnknownCategoryError(category_id)

        if data.price < 0:
            raise ValidationError("Price cannot be negative", {"price": data.price})
        if data.discount_price and data.discount_price > data.price:
            raise DiscountExceedsPriceError(data.price, data.discount_price)

        validate_attributes(data.attributes)
        if data.type == "variable":
            if not data.variants:
                raise MissingFieldError(
                    "Variable products must have at least one variation", ["variants"]
                )
            validate_variants(data.variants, data.attributes)

    async def _unique_slug(self, name: str, product_id: str) -> str:
        slug = slugify(name) or product_id
        if await self.products.slug_exists(slug, exclude_id=product_id):
            raise DuplicateSlugError("product", slug)
        return slug

    def _prepare_variants(self, data: ProductInput, existing: Product | None) -> list[Variant]:
        """Resolve submitted variant ids against the stored product.

        Ids matching a stored variant stay persisted; everything else is
        treated as new and receives a fresh persisted id.
        """
        if data.type != "variable":
            return []
        known = {str(v.id) for v in existing.variants} if existing else set()
        for variant in data.variants:
            raw = str(variant.id)
            variant.id = (
                PersistedVariantId(id=raw) if raw in known else PendingVariantId(client_id=raw)
            )
        return assign_persisted_ids(data.variants)

    def _apply_variant_images(
        self, variants: list[Variant], uploads: dict[int, MediaUpload]
    ) -> None:
        for index, upload in sorted(uploads.items()):
            if not 0 <= index < len(variants):
                logger.warning("Variant image without variant", variant_index=index)
                continue
            try:
                self.media.validate(upload, "image")
            except MediaValidationError as e:
                logger.warning(
                    "Variant image rejected",
                    variant_index=index,
                    filename=upload.filename,
                    reason=e.message,
                )
                continue
            variants[index].image = self.media.save(upload)

    def _save_additional_media(self, uploads: list[MediaUpload]) -> list[MediaItem]:
        saved = []
        for upload in uploads:
            kind = upload.kind
            if kind is None:
                logger.warning("Skipping unsupported media", filename=upload.filename)
                continue
            try:
                url = self.media.validate_and_save(upload, kind)
            except MediaValidationError as e:
                logger.warning("Media rejected", filename=upload.filename, reason=e.message)
                continue
            saved.append(
                MediaItem(
                    url=url,
                    type=kind,
                    name=upload.filename,
                    size=upload.size,
                    mime_type=upload.content_type,
                )
            )
        return saved

    def _referenced_media(self, product: Product) -> set[str]:
        """Managed media URLs a product points at."""
        urls = {product.image}
        urls.update(item.url for item in product.additional_media)
        for variant in product.variants:
            urls.add(variant.image or "")
            urls.update(item.url for item in variant.media)
        return {url for url in urls if self.media.is_managed(url)}

    @staticmethod
    def _apply_fields(product: Product, data: ProductInput) -> None:
        product.name = data.name.strip()
        product.description = data.description.strip()
        product.price = data.price
        product.discount_price = data.discount_price or None
        product.type = data.type
        product.categories = list(data.categories)
        product.sku = data.sku
        product.brand = data.brand
        product.in_stock = data.in_stock
        product.stock_quantity = data.stock_quantity
        product.rating = data.rating
        product.weight = data.weight
        product.dimensions = data.dimensions
        product.shipping_class = data.shipping_class
        product.has_guarantee = data.has_guarantee
        product.has_referral = data.has_referral
        product.has_exchange = data.has_exchange
        product.seo_title = data.seo_title
        product.seo_description = data.seo_description
        product.attributes = list(data.attributes)
        product.specifications = list(data.specifications)
        product.today_offer = data.today_offer
        product.featured = data.featured
