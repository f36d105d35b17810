"""Tests for admin category endpoints."""

from collections.abc import Callable
from typing import Any

from fastapi.testclient import TestClient

from storefront.infrastructure.media import MediaStorage

CreateCategory = Callable[..., dict[str, Any]]


class TestCategoryCrud:
    """Tests for category CRUD."""

    def test_create_category(self, client: TestClient) -> None:
        response = client.post(
            "/admin/categories",
            json={"name": "Home Office", "description": "Desks and chairs"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "home-office"
        assert data["parent_id"] is None
        assert data["children"] == []

    def test_get_category(self, client: TestClient, create_category: CreateCategory) -> None:
        created = create_category("Books")
        response = client.get(f"/admin/categories/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Books"

    def test_unknown_parent(self, client: TestClient) -> None:
        response = client.post("/admin/categories", json={"name": "Laptops", "parent_id": "nope"})
        assert response.status_code == 404

    def test_duplicate_name(self, client: TestClient, create_category: CreateCategory) -> None:
        create_category("Books")
        response = client.post("/admin/categories", json={"name": "Books"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "DUPLICATE_SLUG"

    def test_list_tree_and_flat(self, client: TestClient, create_category: CreateCategory) -> None:
        electronics = create_category("Electronics")
        create_category("Laptops", electronics["id"])
        create_category("Books")

        response = client.get("/admin/categories")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [c["name"] for c in data["tree"]] == ["Electronics", "Books"]
        assert [c["name"] for c in data["tree"][0]["children"]] == ["Laptops"]
        assert [(c["name"], c["level"]) for c in data["flat"]] == [
            ("Electronics", 0),
            ("Laptops", 1),
            ("Books", 0),
        ]

    def test_update_only_sent_fields(self, client: TestClient, create_category: CreateCategory) -> None:
        """Fields absent from the body are left unchanged."""
        parent = create_category("Electronics")
        child = create_category("Audio", parent["id"])

        response = client.put(f"/admin/categories/{child['id']}", json={"name": "Audio Gear"})

        assert response.status_code == 200
        data = response.json()
        assert data["slug"] == "audio-gear"
        assert data["parent_id"] == parent["id"]

    def test_update_to_root(self, client: TestClient, create_category: CreateCategory) -> None:
        parent = create_category("Electronics")
        child = create_category("Audio", parent["id"])
        response = client.put(f"/admin/categories/{child['id']}", json={"parent_id": None})
        assert response.json()["parent_id"] is None

    def test_update_cycle_rejected(self, client: TestClient, create_category: CreateCategory) -> None:
        parent = create_category("Electronics")
        child = create_category("Audio", parent["id"])
        response = client.put(f"/admin/categories/{parent['id']}", json={"parent_id": child["id"]})
        assert response.status_code == 400
        assert response.json()["error_code"] == "CATEGORY_CYCLE"

    def test_delete_leaf(self, client: TestClient, create_category: CreateCategory) -> None:
        created = create_category("Toys")
        assert client.delete(f"/admin/categories/{created['id']}").status_code == 204
        assert client.get(f"/admin/categories/{created['id']}").status_code == 404

    def test_delete_with_children(self, client: TestClient, create_category: CreateCategory) -> None:
        parent = create_category("Electronics")
        create_category("Audio", parent["id"])
        response = client.delete(f"/admin/categories/{parent['id']}")
        assert response.status_code == 400
        assert response.json()["error_code"] == "CATEGORY_HAS_CHILDREN"


class TestCategoryUpload:
    """Tests for the category image upload endpoint."""

    def test_upload_image(self, client: TestClient, media: MediaStorage) -> None:
        response = client.post(
            "/admin/uploads",
            files={"file": ("banner.png", b"\x89PNG image", "image/png")},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["url"].startswith("/uploads/category/")
        assert data["name"] == "banner.png"
        assert data["size"] == len(b"\x89PNG image")
        assert (media.upload_dir / data["url"].removeprefix("/uploads/")).exists()

    def test_upload_rejects_non_image(self, client: TestClient) -> None:
        response = client.post(
            "/admin/uploads",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_MEDIA"

    def test_upload_requires_file(self, client: TestClient) -> None:
        response = client.post("/admin/uploads")
        assert response.status_code == 400
        assert response.json()["error_code"] == "MISSING_FIELD"
