"""Admin product endpoints.

Products are created and updated from a multipart form so images,
videos and variant images can be uploaded together with the fields.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status

from storefront.api.converters import product_to_response, variant_to_response
from storefront.api.forms import parse_product_form
from storefront.api.schemas import (
    ErrorResponse,
    ProductResponse,
    SeedResponse,
    VariantGenerateRequest,
    VariantGenerateResponse,
)
from storefront.application.product_service import ProductService
from storefront.application.seed_service import SeedService
from storefront.domain.value_objects import Attribute

router = APIRouter(prefix="/admin", tags=["Admin"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service() -> ProductService:
    """Get product service."""
    return ProductService()


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/products",
    response_model=list[ProductResponse],
    summary="List products",
    description="All products, newest first.",
)
async def list_products(
    service: Annotated[ProductService, Depends(get_service)],
) -> list[ProductResponse]:
    return [product_to_response(p) for p in await service.list_all()]


@router.post(
    "/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Create product",
)
async def create_product(
    request: Request,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Create a product from the multipart product form.

    A main image is required, either uploaded as ``mainImage`` or given
    as ``imageUrl``. Variable products need at least one variant.
    """
    data, changes = await parse_product_form(await request.form())
    product = await service.create(data, changes)
    return product_to_response(product)


@router.post(
    "/products/variants/generate",
    response_model=VariantGenerateResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Generate variants",
    description="Preview one variant per combination of attribute values.",
)
async def generate_product_variants(
    request: VariantGenerateRequest,
    service: Annotated[ProductService, Depends(get_service)],
) -> VariantGenerateResponse:
    attributes = [Attribute(name=a.name, values=tuple(a.values)) for a in request.attributes]
    variants = service.preview_variants(
        attributes,
        price=request.price,
        discount_price=request.discount_price,
    )
    return VariantGenerateResponse(
        variants=[variant_to_response(v) for v in variants],
        count=len(variants),
    )


@router.post(
    "/seed",
    response_model=SeedResponse,
    summary="Seed sample catalog",
)
async def seed_catalog(
    mode: Annotated[str, Query(pattern="^(small|full)$")] = "small",
    clear: bool = True,
) -> SeedResponse:
    """Replace the catalog with generated sample data."""
    result = await SeedService().seed_catalog(mode=mode, clear_existing=clear)
    return SeedResponse(**result)


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(
    product_id: str,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    return product_to_response(await service.get(product_id))


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update product",
)
async def update_product(
    product_id: str,
    request: Request,
    service: Annotated[ProductService, Depends(get_service)],
) -> ProductResponse:
    """Update a product from the multipart product form.

    Replaced and removed media files are deleted from storage. Variants
    keep their ids when resubmitted with them.
    """
    data, changes = await parse_product_form(await request.form())
    product = await service.update(product_id, data, changes)
    return product_to_response(product)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    service: Annotated[ProductService, Depends(get_service)],
) -> Response:
    """Delete a product and its media files."""
    await service.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
