"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from storefront.infrastructure.config import settings
from storefront.infrastructure.document_store import CATEGORIES, get_document_store

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="storefront-api",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check() -> dict[str, str]:
    """Check if the document store answers queries.

    Returns:
        Readiness status and storage backend.
    """
    await get_document_store().count(CATEGORIES)
    return {"status": "ready", "storage": settings.storage_backend}
