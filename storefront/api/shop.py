"""Shop page endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from storefront.api.converters import category_to_list_item, product_to_response
from storefront.api.schemas import ShopResponse
from storefront.application.shop_service import ShopQuery, ShopService
from storefront.catalog.pipeline import SortField, SortOrder

router = APIRouter(tags=["Storefront"])


def get_service() -> ShopService:
    return ShopService()


@router.get(
    "/shop",
    response_model=ShopResponse,
    summary="Shop page",
    description=(
        "Filter and sort the catalog, then reveal the first `pages` pages "
        "of the result."
    ),
)
async def shop(
    service: Annotated[ShopService, Depends(get_service)],
    category: str | None = Query(default=None, description="Category slug"),
    categories: str = Query(default="", description="Comma-separated category ids"),
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    in_stock: bool = False,
    featured: bool = False,
    today_offer: bool = False,
    sort_by: SortField = SortField.NAME,
    sort_order: SortOrder = SortOrder.ASC,
    pages: int = Query(default=1, ge=1),
) -> ShopResponse:
    view = await service.view(
        ShopQuery(
            category=category,
            categories=[c.strip() for c in categories.split(",") if c.strip()],
            min_price=min_price,
            max_price=max_price,
            in_stock=in_stock,
            featured=featured,
            today_offer=today_offer,
            sort_by=sort_by.value,
            sort_order=sort_order.value,
            pages=pages,
        )
    )
    levels = {c.id: level for c, level in view.category_levels}
    return ShopResponse(
        products=[product_to_response(p) for p in view.items],
        total=view.total,
        visible_count=len(view.items),
        has_more=view.has_more,
        selected_categories=[
            category_to_list_item(c, levels.get(c.id, 0)) for c in view.selected_categories
        ],
        categories=[category_to_list_item(c, level) for c, level in view.category_levels],
    )
