"""Admin category endpoints.

Provides endpoints for managing the category hierarchy.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from storefront.api.converters import category_to_list_item, category_to_response
from storefront.api.forms import to_media_upload
from storefront.api.schemas import (
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdateRequest,
    ErrorResponse,
    UploadResponse,
)
from storefront.application.category_service import UNSET, CategoryService
from storefront.domain.exceptions import MissingFieldError
from storefront.infrastructure.media import MediaStorage, get_media_storage

router = APIRouter(prefix="/admin", tags=["Admin"])

CATEGORY_UPLOAD_DIR = "category"


# ============================================================================
# Dependencies
# ============================================================================


def get_service() -> CategoryService:
    """Get category service."""
    return CategoryService()


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    summary="List categories",
    description="Category tree and its flattened listing with product counts.",
)
async def list_categories(
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryListResponse:
    """List all categories as a tree and as an indented flat list."""
    nodes = await service.list_flattened()
    counts = {node.category.id: node.product_count for node in nodes}
    tree = await service.get_tree()
    return CategoryListResponse(
        tree=[category_to_response(root, counts) for root in tree.roots],
        flat=[
            category_to_list_item(node.category, node.level, node.product_count)
            for node in nodes
        ],
        total=len(nodes),
    )


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Create category",
)
async def create_category(
    request: CategoryCreateRequest,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryResponse:
    """Create a category under an optional parent."""
    category = await service.create(
        name=request.name,
        description=request.description,
        parent_id=request.parent_id,
        image=request.image,
    )
    return category_to_response(category)


@router.get(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get category",
)
async def get_category(
    category_id: str,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryResponse:
    return category_to_response(await service.get(category_id))


@router.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Update category",
)
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryResponse:
    """Update a category.

    Renaming regenerates the slug. Re-parenting under the category itself
    or one of its descendants is rejected.
    """
    provided = request.model_fields_set
    category = await service.update(
        category_id,
        name=request.name,
        description=request.description,
        parent_id=request.parent_id if "parent_id" in provided else UNSET,
        image=request.image if "image" in provided else UNSET,
    )
    return category_to_response(category)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete category",
)
async def delete_category(
    category_id: str,
    service: Annotated[CategoryService, Depends(get_service)],
) -> Response:
    """Delete a category that has no subcategories."""
    await service.delete(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/uploads",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Upload category image",
)
async def upload_category_image(
    media: Annotated[MediaStorage, Depends(get_media_storage)],
    file: UploadFile | None = File(default=None),
) -> UploadResponse:
    """Validate and store a category image under the category upload folder."""
    upload = await to_media_upload(file)
    if upload is None:
        raise MissingFieldError("No file uploaded", ["file"])
    url = media.validate_and_save(upload, "image", subdir=CATEGORY_UPLOAD_DIR)
    return UploadResponse(url=url, name=upload.filename, size=upload.size, type=upload.content_type)
