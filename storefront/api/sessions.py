"""Session cart and comparison endpoints.

Both stores are scoped to the ``X-Session-ID`` header sent by the client.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, status

from storefront.api.converters import product_to_response
from storefront.api.schemas import (
    CartAddRequest,
    CartItemSchema,
    CartResponse,
    CartUpdateRequest,
    ComparisonAddRequest,
    ComparisonAddResponse,
    ComparisonResponse,
    ErrorResponse,
)
from storefront.application.session_service import SessionService
from storefront.domain.cart import Cart
from storefront.domain.comparison import ComparisonSet

SESSION_HEADER = "X-Session-ID"

router = APIRouter(tags=["Session"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(
    session_id: Annotated[str, Header(alias=SESSION_HEADER, min_length=1)],
) -> SessionService:
    """Get the session service for the calling client."""
    return SessionService(session_id)


# ============================================================================
# Converters
# ============================================================================


def cart_to_response(cart: Cart) -> CartResponse:
    return CartResponse(
        items=[CartItemSchema(**entry.to_dict()) for entry in cart.entries],
        total=cart.total,
        item_count=cart.item_count,
    )


def comparison_to_response(comparison: ComparisonSet) -> ComparisonResponse:
    return ComparisonResponse(
        products=[product_to_response(p) for p in comparison.products],
        count=len(comparison),
        capacity=comparison.capacity,
        can_add_more=comparison.can_add_more,
    )


# ============================================================================
# Cart
# ============================================================================


@router.get("/cart", response_model=CartResponse, summary="Get cart")
async def get_cart(
    service: Annotated[SessionService, Depends(get_service)],
) -> CartResponse:
    return cart_to_response(service.cart)


@router.post(
    "/cart/items",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add to cart",
)
async def add_cart_item(
    request: CartAddRequest,
    service: Annotated[SessionService, Depends(get_service)],
) -> CartResponse:
    """Add an item; adding an existing line increases its quantity up to stock."""
    await service.add_to_cart(request.product_id, request.variant_id, request.quantity)
    return cart_to_response(service.cart)


@router.patch(
    "/cart/items",
    response_model=CartResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Set cart quantity",
)
async def update_cart_item(
    request: CartUpdateRequest,
    service: Annotated[SessionService, Depends(get_service)],
) -> CartResponse:
    """Set a line's quantity; zero or less removes the line."""
    service.update_cart_quantity(request.product_id, request.quantity, request.variant_id)
    return cart_to_response(service.cart)


@router.delete("/cart/items/{product_id}", response_model=CartResponse, summary="Remove from cart")
async def remove_cart_item(
    product_id: str,
    service: Annotated[SessionService, Depends(get_service)],
    variant_id: str | None = Query(default=None),
) -> CartResponse:
    service.remove_from_cart(product_id, variant_id)
    return cart_to_response(service.cart)


@router.delete("/cart", response_model=CartResponse, summary="Clear cart")
async def clear_cart(
    service: Annotated[SessionService, Depends(get_service)],
) -> CartResponse:
    service.clear_cart()
    return cart_to_response(service.cart)


# ============================================================================
# Comparison
# ============================================================================


@router.get("/comparison", response_model=ComparisonResponse, summary="Get comparison set")
async def get_comparison(
    service: Annotated[SessionService, Depends(get_service)],
) -> ComparisonResponse:
    return comparison_to_response(service.comparison)


@router.post(
    "/comparison/items",
    response_model=ComparisonAddResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Add to comparison",
)
async def add_comparison_item(
    request: ComparisonAddRequest,
    service: Annotated[SessionService, Depends(get_service)],
) -> ComparisonAddResponse:
    """Add a product to the comparison set.

    When the set is full the set is left unchanged and the response
    carries a warning.
    """
    result = await service.add_to_comparison(request.product_id)
    return ComparisonAddResponse(
        outcome=result.outcome.value,
        warning=result.warning,
        comparison=comparison_to_response(service.comparison),
    )


@router.delete(
    "/comparison/items/{product_id}",
    response_model=ComparisonResponse,
    summary="Remove from comparison",
)
async def remove_comparison_item(
    product_id: str,
    service: Annotated[SessionService, Depends(get_service)],
) -> ComparisonResponse:
    service.remove_from_comparison(product_id)
    return comparison_to_response(service.comparison)


@router.delete("/comparison", response_model=ComparisonResponse, summary="Clear comparison set")
async def clear_comparison(
    service: Annotated[SessionService, Depends(get_service)],
) -> ComparisonResponse:
    service.clear_comparison()
    return comparison_to_response(service.comparison)
