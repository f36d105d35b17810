"""API schemas for the storefront API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PaginationSchema(BaseModel):
    """Page pagination metadata."""

    page: int = Field(..., description="Current page number (1-based)")
    limit: int = Field(..., description="Items per page")
    total_count: int = Field(..., description="Total number of matching items")
    total_pages: int = Field(..., description="Total number of pages")
    has_next: bool = Field(..., description="Whether a next page exists")
    has_prev: bool = Field(..., description="Whether a previous page exists")


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryCreateRequest(BaseModel):
    """Request to create a category."""

    name: str = Field(..., description="Category name")
    description: str | None = Field(default=None, description="Optional description")
    parent_id: str | None = Field(default=None, description="Parent category ID")
    image: str | None = Field(default=None, description="Image URL")


class CategoryUpdateRequest(BaseModel):
    """Request to update a category.

    Omitted fields are left unchanged; an explicit null ``parent_id``
    moves the category to the root.
    """

    name: str | None = None
    description: str | None = None
    parent_id: str | None = None
    image: str | None = None


class CategoryResponse(BaseModel):
    """Category representation, optionally with nested children."""

    id: str
    name: str
    slug: str
    parent_id: str | None = None
    description: str = ""
    image: str | None = None
    product_count: int | None = None
    children: list["CategoryResponse"] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


CategoryResponse.model_rebuild()


class CategoryListItem(BaseModel):
    """Flattened category with its depth."""

    id: str
    name: str
    slug: str
    parent_id: str | None = None
    level: int
    product_count: int = 0


class CategoryListResponse(BaseModel):
    """Category tree plus its flattened pre-order listing."""

    tree: list[CategoryResponse]
    flat: list[CategoryListItem]
    total: int


# ============================================================================
# Product Schemas
# ============================================================================


class MediaItemSchema(BaseModel):
    """Attached image or video."""

    url: str
    type: Literal["image", "video"] = "image"
    name: str | None = None
    size: int | None = None
    mime_type: str | None = None


class SpecificationSchema(BaseModel):
    """Key/value specification row."""

    key: str
    value: str


class AttributeSchema(BaseModel):
    """Product attribute with its allowed values."""

    name: str
    values: list[str] = Field(default_factory=list)


class VariantAttributeSchema(BaseModel):
    """The value a variant takes for one attribute."""

    name: str
    value: str


class DimensionsSchema(BaseModel):
    """Package dimensions."""

    width: float = 0
    height: float = 0
    depth: float = 0


class VariantSchema(BaseModel):
    """Product variant."""

    id: str = Field(..., description="Variant ID")
    persisted: bool = Field(..., description="Whether the ID has been stored")
    name: str
    sku: str = ""
    price: float
    discount_price: float | None = None
    effective_price: float
    in_stock: bool = True
    stock_quantity: int = 0
    attributes: list[VariantAttributeSchema] = Field(default_factory=list)
    specifications: list[SpecificationSchema] = Field(default_factory=list)
    media: list[MediaItemSchema] = Field(default_factory=list)
    image: str | None = None


class ProductResponse(BaseModel):
    """Product representation."""

    id: str
    name: str
    slug: str
    description: str
    price: float
    discount_price: float | None = None
    effective_price: float
    price_range: tuple[float, float]
    type: Literal["simple", "variable"]
    categories: list[str]
    image: str
    additional_media: list[MediaItemSchema] = Field(default_factory=list)
    specifications: list[SpecificationSchema] = Field(default_factory=list)
    attributes: list[AttributeSchema] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)
    sku: str = ""
    brand: str = ""
    in_stock: bool
    stock_quantity: int = 0
    rating: float = 0
    review_count: int = 0
    today_offer: bool = False
    featured: bool = False
    seo_title: str = ""
    seo_description: str = ""
    weight: float = 0
    dimensions: DimensionsSchema = Field(default_factory=DimensionsSchema)
    shipping_class: str = ""
    has_guarantee: bool = False
    has_referral: bool = False
    has_exchange: bool = False
    created_at: datetime
    updated_at: datetime


class ProductDetailResponse(ProductResponse):
    """Product with resolved category names."""

    category_names: list[str] = Field(default_factory=list)


class ProductListResponse(BaseModel):
    """Paginated product listing."""

    products: list[ProductResponse]
    pagination: PaginationSchema


class VariantGenerateRequest(BaseModel):
    """Request to preview the variant matrix for a set of attributes."""

    attributes: list[AttributeSchema] = Field(default_factory=list)
    price: float = Field(default=0, ge=0, description="Default variant price")
    discount_price: float | None = Field(default=None, ge=0, description="Default discount")


class VariantGenerateResponse(BaseModel):
    """Generated variants."""

    variants: list[VariantSchema]
    count: int


class UploadResponse(BaseModel):
    """Stored upload."""

    url: str
    name: str
    size: int
    type: str


class SeedResponse(BaseModel):
    """Sample catalog seeding result."""

    mode: str
    deleted: int
    categories_created: int
    products_created: int
    variants_created: int
    brands_used: int


# ============================================================================
# Review Schemas
# ============================================================================


class ReviewCreateRequest(BaseModel):
    """Review submission.

    Completeness and rating range are checked by the review service.
    """

    username: str = ""
    email: str = ""
    rating: int = 0
    comment: str = ""


class ReviewResponse(BaseModel):
    """Stored review."""

    id: str
    product_slug: str
    username: str
    email: str
    rating: int
    comment: str
    verified: bool
    helpful: int
    created_at: datetime


class ReviewSummarySchema(BaseModel):
    """Rating aggregates."""

    count: int
    average: float
    distribution: dict[int, int]


class ReviewListResponse(BaseModel):
    """Reviews for a product with their summary."""

    reviews: list[ReviewResponse]
    summary: ReviewSummarySchema


# ============================================================================
# Search Schemas
# ============================================================================


class SearchResultSchema(BaseModel):
    """Unified product or category search hit."""

    id: str
    type: Literal["product", "category"]
    name: str
    slug: str
    description: str = ""
    price: float | None = None
    discount_price: float | None = None
    image: str | None = None
    in_stock: bool | None = None
    rating: float | None = None
    today_offer: bool | None = None
    featured: bool | None = None
    categories: list[str] = Field(default_factory=list)
    category_names: list[str] = Field(default_factory=list)


# ============================================================================
# Shop Schemas
# ============================================================================


class ShopResponse(BaseModel):
    """Shop page window."""

    products: list[ProductResponse]
    total: int = Field(..., description="Number of products matching the filters")
    visible_count: int = Field(..., description="Number of products revealed")
    has_more: bool = Field(..., description="Whether another page can be revealed")
    selected_categories: list[CategoryListItem] = Field(default_factory=list)
    categories: list[CategoryListItem] = Field(default_factory=list)


# ============================================================================
# Cart & Comparison Schemas
# ============================================================================


class CartAddRequest(BaseModel):
    """Request to add an item to the cart."""

    product_id: str
    variant_id: str | None = None
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(BaseModel):
    """Request to set a cart line's quantity; zero or less removes it."""

    product_id: str
    variant_id: str | None = None
    quantity: int


class CartItemSchema(BaseModel):
    """Cart line."""

    product_id: str
    variant_id: str | None = None
    name: str
    variant_name: str | None = None
    slug: str
    image: str | None = None
    unit_price: float
    quantity: int
    line_total: float


class CartResponse(BaseModel):
    """Session cart."""

    items: list[CartItemSchema]
    total: float
    item_count: int


class ComparisonAddRequest(BaseModel):
    """Request to add a product to the comparison set."""

    product_id: str


class ComparisonResponse(BaseModel):
    """Session comparison set."""

    products: list[ProductResponse]
    count: int
    capacity: int
    can_add_more: bool


class ComparisonAddResponse(BaseModel):
    """Outcome of a comparison add."""

    outcome: Literal["added", "already_present", "capacity_reached"]
    warning: str | None = None
    comparison: ComparisonResponse
