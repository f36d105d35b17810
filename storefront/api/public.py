"""Public storefront endpoints.

Read-only catalog access for the storefront plus review submission.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from storefront.api.converters import category_to_response, product_fields, product_to_response
from storefront.api.schemas import (
    CategoryResponse,
    ErrorResponse,
    PaginationSchema,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
    ReviewCreateRequest,
    ReviewListResponse,
    ReviewResponse,
    ReviewSummarySchema,
)
from storefront.application.category_service import CategoryService
from storefront.application.product_service import ProductQuery, ProductService
from storefront.application.review_service import ReviewService, summarize
from storefront.domain.entities import Review

router = APIRouter(prefix="/public", tags=["Storefront"])


# ============================================================================
# Dependencies
# ============================================================================


def get_product_service() -> ProductService:
    return ProductService()


def get_review_service() -> ReviewService:
    return ReviewService()


def get_category_service() -> CategoryService:
    return CategoryService()


def review_to_response(review: Review) -> ReviewResponse:
    """Convert Review entity to response schema."""
    return ReviewResponse(
        id=review.id,
        product_slug=review.product_slug,
        username=review.username,
        email=review.email,
        rating=review.rating,
        comment=review.comment,
        verified=review.verified,
        helpful=review.helpful,
        created_at=review.created_at,
    )


# ============================================================================
# Products
# ============================================================================


@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="List products",
    description="Filtered product listing, newest first, with page pagination.",
)
async def list_products(
    service: Annotated[ProductService, Depends(get_product_service)],
    category: str | None = Query(default=None, description="Category id, slug or name"),
    categories: str | None = Query(default=None, description="Comma-separated categories"),
    featured: bool | None = Query(default=None),
    today_offer: bool | None = Query(default=None, alias="todayOffer"),
    in_stock: bool | None = Query(default=None, alias="inStock"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> ProductListResponse:
    """List products.

    ``categories`` takes precedence over ``category`` when both are given.
    """
    selected: list[str] = []
    if categories:
        selected = [c.strip() for c in categories.split(",") if c.strip()]
    elif category:
        selected = [category]

    result = await service.list_public(
        ProductQuery(
            categories=selected,
            featured=featured,
            today_offer=today_offer,
            in_stock=in_stock,
        ),
        page=page,
        limit=limit,
    )
    return ProductListResponse(
        products=[product_to_response(p) for p in result.items],
        pagination=PaginationSchema(
            page=result.page,
            limit=result.page_size,
            total_count=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        ),
    )


@router.get(
    "/products/{slug}",
    response_model=ProductDetailResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product by slug",
)
async def get_product(
    slug: str,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductDetailResponse:
    detail = await service.get_detail(slug)
    return ProductDetailResponse(
        **product_fields(detail.product),
        category_names=detail.category_names,
    )


@router.get(
    "/products/{slug}/similar",
    response_model=list[ProductResponse],
    responses={404: {"model": ErrorResponse}},
    summary="Similar products",
    description="In-stock products sharing a category with the given product.",
)
async def similar_products(
    slug: str,
    service: Annotated[ProductService, Depends(get_product_service)],
) -> list[ProductResponse]:
    return [product_to_response(p) for p in await service.similar(slug)]


# ============================================================================
# Reviews
# ============================================================================


@router.get(
    "/products/{slug}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews",
)
async def list_reviews(
    slug: str,
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> ReviewListResponse:
    reviews = await service.list_for_product(slug)
    summary = summarize(reviews)
    return ReviewListResponse(
        reviews=[review_to_response(r) for r in reviews],
        summary=ReviewSummarySchema(
            count=summary.count,
            average=summary.average,
            distribution=summary.distribution,
        ),
    )


@router.post(
    "/products/{slug}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Submit review",
)
async def submit_review(
    slug: str,
    request: ReviewCreateRequest,
    service: Annotated[ReviewService, Depends(get_review_service)],
) -> ReviewResponse:
    """Submit a review. All fields are required and rating must be 1-5."""
    review = await service.submit(
        product_slug=slug,
        username=request.username,
        email=request.email,
        rating=request.rating,
        comment=request.comment,
    )
    return review_to_response(review)


# ============================================================================
# Categories
# ============================================================================


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    summary="Category tree",
    description="Root categories with nested children and product counts.",
)
async def category_tree(
    service: Annotated[CategoryService, Depends(get_category_service)],
) -> list[CategoryResponse]:
    nodes = await service.list_flattened()
    counts = {node.category.id: node.product_count for node in nodes}
    tree = await service.get_tree()
    return [category_to_response(root, counts) for root in tree.roots]
