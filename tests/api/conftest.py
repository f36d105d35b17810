"""Shared fixtures for API tests."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from storefront.application.session_service import get_session_registry
from storefront.infrastructure.document_store import InMemoryDocumentStore, set_document_store
from storefront.infrastructure.media import MediaStorage, set_media_storage
from storefront.main import app


@pytest.fixture(autouse=True)
def isolated_state(tmp_path: Path) -> Iterator[MediaStorage]:
    """Fresh document store, upload dir and session registry per test."""
    media = MediaStorage(upload_dir=tmp_path / "uploads", url_prefix="/uploads")
    set_document_store(InMemoryDocumentStore())
    set_media_storage(media)
    get_session_registry().reset()
    yield media
    set_document_store(None)
    set_media_storage(None)
    get_session_registry().reset()


@pytest.fixture
def media(isolated_state: MediaStorage) -> MediaStorage:
    return isolated_state


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def session_headers() -> dict[str, str]:
    return {"X-Session-ID": "test-session"}


@pytest.fixture
def create_category(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a category through the admin API."""

    def _create(name: str, parent_id: str | None = None) -> dict[str, Any]:
        response = client.post("/admin/categories", json={"name": name, "parent_id": parent_id})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


def product_form(**fields: Any) -> dict[str, str]:
    """Multipart form fields for the admin product form.

    List and dict values are JSON-encoded the way the admin UI sends them.
    """
    form = {
        "name": "Desk Lamp",
        "description": "Warm LED desk lamp",
        "price": "40",
        "inStock": "true",
        "stockQuantity": "10",
        "imageUrl": "https://cdn.example.com/lamp.png",
    }
    for key, value in fields.items():
        if value is None:
            form.pop(key, None)
        elif isinstance(value, (list, dict)):
            form[key] = json.dumps(value)
        else:
            form[key] = str(value)
    return form


@pytest.fixture
def create_product(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a product through the admin API."""

    def _create(categories: list[str], **fields: Any) -> dict[str, Any]:
        response = client.post(
            "/admin/products",
            data=product_form(categories=categories, **fields),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def build_form() -> Callable[..., dict[str, str]]:
    return product_form
