"""
Tests for the authenticated admin endpoints.
"""

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happy.images.storage import InMemoryStorageProvider
from happy.orphanages.models import Image, Orphanage


class TestAdminRequiresToken:
    """Every admin route rejects anonymous callers."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("GET", "/admin/orphanages"),
            ("GET", "/admin/orphanages/pending"),
            ("GET", "/admin/orphanages/1"),
            ("PUT", "/admin/orphanages/1"),
            ("PATCH", "/admin/orphanages/1/approve"),
            ("DELETE", "/admin/orphanages/1"),
            ("DELETE", "/admin/images/1"),
        ],
    )
    async def test_missing_token(
        self,
        async_client: AsyncClient,
        method: str,
        path: str,
    ) -> None:
        response = await async_client.request(method, path)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"]["code"] == "MISSING_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_invalid_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/admin/orphanages/pending",
            headers={"Authorization": "Bearer not.a.token"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"]["code"] == "INVALID_TOKEN"


class TestAdminListing:
    """Tests for admin list and get routes."""

    @pytest.mark.asyncio
    async def test_list_approved(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        approved_orphanage: Orphanage,
        pending_orphanage: Orphanage,
    ) -> None:
        response = await async_client.get("/admin/orphanages", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [o["id"] for o in response.json()["orphanages"]] == [approved_orphanage.id]

    @pytest.mark.asyncio
    async def test_list_pending(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        approved_orphanage: Orphanage,
        pending_orphanage: Orphanage,
    ) -> None:
        response = await async_client.get("/admin/orphanages/pending", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        orphanages = response.json()["orphanages"]
        assert [o["id"] for o in orphanages] == [pending_orphanage.id]
        assert orphanages[0]["pending"] is True

    @pytest.mark.asyncio
    async def test_get_one(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        pending_orphanage: Orphanage,
    ) -> None:
        response = await async_client.get(
            f"/admin/orphanages/{pending_orphanage.id}",
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["orphanage"]["name"] == "Pending Home"

    @pytest.mark.asyncio
    async def test_get_missing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await async_client.get("/admin/orphanages/999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["code"] == "ORPHANAGE_NOT_FOUND"


class TestAdminUpdate:
    """Tests for PUT /admin/orphanages/{id}."""

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_appends_images(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        storage: InMemoryStorageProvider,
        approved_orphanage: Orphanage,
        orphanage_form: dict[str, str],
        png_bytes: bytes,
    ) -> None:
        orphanage_form["name"] = "Renamed Home"
        orphanage_form["open_on_weekends"] = "false"

        response = await async_client.put(
            f"/admin/orphanages/{approved_orphanage.id}",
            headers=auth_headers,
            data=orphanage_form,
            files=[("images", ("new.webp", png_bytes, "image/webp"))],
        )

        assert response.status_code == status.HTTP_200_OK
        orphanage = response.json()["orphanage"]
        assert orphanage["id"] == approved_orphanage.id
        assert orphanage["name"] == "Renamed Home"
        assert orphanage["about"] == orphanage_form["about"]
        assert orphanage["open_on_weekends"] is False
        assert orphanage["pending"] is False
        urls = [image["url"] for image in orphanage["images"]]
        assert len(urls) == 3
        assert urls[:2] == [
            "http://localhost/mock-storage/a1-front.png",
            "http://localhost/mock-storage/a2-garden.png",
        ]
        assert urls[2].endswith("-new.webp")
        assert len(storage.keys) == 3

    @pytest.mark.asyncio
    async def test_update_requires_every_field(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        approved_orphanage: Orphanage,
    ) -> None:
        response = await async_client.put(
            f"/admin/orphanages/{approved_orphanage.id}",
            headers=auth_headers,
            data={"name": "Only a name"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_update_missing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        orphanage_form: dict[str, str],
    ) -> None:
        response = await async_client.put(
            "/admin/orphanages/999",
            headers=auth_headers,
            data=orphanage_form,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAdminApprove:
    """Tests for PATCH /admin/orphanages/{id}/approve."""

    @pytest.mark.asyncio
    async def test_approve_publishes_listing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        pending_orphanage: Orphanage,
    ) -> None:
        response = await async_client.patch(
            f"/admin/orphanages/{pending_orphanage.id}/approve",
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["orphanage"]["pending"] is False

        public = await async_client.get("/orphanages")
        assert [o["id"] for o in public.json()["orphanages"]] == [pending_orphanage.id]

    @pytest.mark.asyncio
    async def test_approve_is_idempotent(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        approved_orphanage: Orphanage,
    ) -> None:
        response = await async_client.patch(
            f"/admin/orphanages/{approved_orphanage.id}/approve",
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["orphanage"]["pending"] is False

    @pytest.mark.asyncio
    async def test_approve_missing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await async_client.patch("/admin/orphanages/999/approve", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAdminDelete:
    """Tests for deleting orphanages and single images."""

    @pytest.mark.asyncio
    async def test_delete_orphanage_removes_rows_and_files(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        db_session: AsyncSession,
        storage: InMemoryStorageProvider,
        approved_orphanage: Orphanage,
        pending_orphanage: Orphanage,
    ) -> None:
        response = await async_client.delete(
            f"/admin/orphanages/{approved_orphanage.id}",
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response.content == b""
        assert (await async_client.get(f"/orphanages/{approved_orphanage.id}")).status_code == 404
        images = (await db_session.execute(select(Image))).scalars().all()
        assert [image.orphanage_id for image in images] == [pending_orphanage.id]
        assert storage.keys == ["p1-door.png"]

    @pytest.mark.asyncio
    async def test_delete_orphanage_missing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await async_client.delete("/admin/orphanages/999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_image(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        db_session: AsyncSession,
        storage: InMemoryStorageProvider,
        approved_orphanage: Orphanage,
    ) -> None:
        image_id = approved_orphanage.images[0].id

        response = await async_client.delete(f"/admin/images/{image_id}", headers=auth_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert await db_session.get(Image, image_id) is None
        assert storage.keys == ["a2-garden.png"]

        listing = await async_client.get(f"/orphanages/{approved_orphanage.id}")
        assert [image["url"] for image in listing.json()["orphanage"]["images"]] == [
            "http://localhost/mock-storage/a2-garden.png"
        ]

    @pytest.mark.asyncio
    async def test_delete_image_missing(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await async_client.delete("/admin/images/999", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["code"] == "IMAGE_NOT_FOUND"
