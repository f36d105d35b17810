"""Entity to response schema converters shared by the routers."""

from storefront.api.schemas import (
    AttributeSchema,
    CategoryListItem,
    CategoryResponse,
    DimensionsSchema,
    MediaItemSchema,
    ProductResponse,
    SpecificationSchema,
    VariantAttributeSchema,
    VariantSchema,
)
from storefront.domain.entities import Category, Product, Variant
from storefront.domain.value_objects import MediaItem, Specification


def media_to_schema(item: MediaItem) -> MediaItemSchema:
    return MediaItemSchema(
        url=item.url,
        type=item.type,
        name=item.name,
        size=item.size,
        mime_type=item.mime_type,
    )


def specification_to_schema(spec: Specification) -> SpecificationSchema:
    return SpecificationSchema(key=spec.key, value=spec.value)


def variant_to_response(variant: Variant) -> VariantSchema:
    """Convert Variant entity to response schema."""
    return VariantSchema(
        id=str(variant.id),
        persisted=variant.is_persisted,
        name=variant.name,
        sku=variant.sku,
        price=variant.price,
        discount_price=variant.discount_price,
        effective_price=variant.effective_price,
        in_stock=variant.in_stock,
        stock_quantity=variant.stock_quantity,
        attributes=[
            VariantAttributeSchema(name=a.name, value=a.value) for a in variant.attributes
        ],
        specifications=[specification_to_schema(s) for s in variant.specifications],
        media=[media_to_schema(m) for m in variant.media],
        image=variant.image,
    )


def product_fields(product: Product) -> dict:
    """Field values shared by all product response schemas."""
    return dict(
        id=product.id,
        name=product.name,
        slug=product.slug,
        description=product.description,
        price=product.price,
        discount_price=product.discount_price,
        effective_price=product.effective_price,
        price_range=product.price_range(),
        type=product.type,
        categories=list(product.categories),
        image=product.image,
        additional_media=[media_to_schema(m) for m in product.additional_media],
        specifications=[specification_to_schema(s) for s in product.specifications],
        attributes=[AttributeSchema(name=a.name, values=list(a.values)) for a in product.attributes],
        variants=[variant_to_response(v) for v in product.variants],
        sku=product.sku,
        brand=product.brand,
        in_stock=product.in_stock,
        stock_quantity=product.stock_quantity,
        rating=product.rating,
        review_count=product.review_count,
        today_offer=product.today_offer,
        featured=product.featured,
        seo_title=product.seo_title,
        seo_description=product.seo_description,
        weight=product.weight,
        dimensions=DimensionsSchema(**product.dimensions.to_dict()),
        shipping_class=product.shipping_class,
        has_guarantee=product.has_guarantee,
        has_referral=product.has_referral,
        has_exchange=product.has_exchange,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product entity to response schema."""
    return ProductResponse(**product_fields(product))


def category_to_response(
    category: Category,
    counts: dict[str, int] | None = None,
) -> CategoryResponse:
    """Convert a category and its derived children to a nested schema."""
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        parent_id=category.parent_id,
        description=category.description,
        image=category.image,
        product_count=counts.get(category.id, 0) if counts is not None else None,
        children=[category_to_response(child, counts) for child in category.children],
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def category_to_list_item(category: Category, level: int, product_count: int = 0) -> CategoryListItem:
    return CategoryListItem(
        id=category.id,
        name=category.name,
        slug=category.slug,
        parent_id=category.parent_id,
        level=level,
        product_count=product_count,
    )
