"""Search endpoints.

Live header search and category-scoped product search.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.schemas import SearchResultSchema
from storefront.application.search_service import ProductHit, SearchService
from storefront.domain.entities import Category

router = APIRouter(prefix="/search", tags=["Search"])


def get_service() -> SearchService:
    return SearchService()


def hit_to_schema(hit: ProductHit) -> SearchResultSchema:
    product = hit.product
    return SearchResultSchema(
        id=product.id,
        type="product",
        name=product.name,
        slug=product.slug,
        description=product.description,
        price=product.price,
        discount_price=product.discount_price,
        image=product.image,
        in_stock=product.in_stock,
        rating=product.rating,
        today_offer=product.today_offer,
        featured=product.featured,
        categories=list(product.categories),
        category_names=hit.category_names,
    )


def category_to_schema(category: Category) -> SearchResultSchema:
    return SearchResultSchema(
        id=category.id,
        type="category",
        name=category.name,
        slug=category.slug,
        description=category.description,
        image=category.image,
        category_names=[category.name],
    )


@router.get(
    "",
    response_model=list[SearchResultSchema],
    summary="Search products and categories",
)
async def search(
    service: Annotated[SearchService, Depends(get_service)],
    q: str = Query(default="", description="Search text"),
) -> list[SearchResultSchema]:
    """Products matching name or description, followed by matching categories.

    A blank query returns an empty list.
    """
    results = await service.search(q)
    return [hit_to_schema(h) for h in results.products] + [
        category_to_schema(c) for c in results.categories
    ]


@router.get(
    "/categories",
    response_model=list[SearchResultSchema],
    summary="Search products within categories",
)
async def search_in_categories(
    service: Annotated[SearchService, Depends(get_service)],
    q: str = Query(default="", description="Search text"),
    categories: str = Query(default="", description="Comma-separated category ids"),
) -> list[SearchResultSchema]:
    category_ids = [c.strip() for c in categories.split(",") if c.strip()]
    return [hit_to_schema(h) for h in await service.search_in_categories(q, category_ids)]
