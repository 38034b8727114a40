"""
Tests for serving locally stored uploads under /uploads.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import status
from httpx import ASGITransport, AsyncClient

from happy.images.storage import LocalStorageProvider
from happy.main import create_app


@pytest.fixture
def uploads_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    directory = tmp_path / "fresh" / "uploads"
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("UPLOADS_DIR", str(directory))
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://test")
    return directory


@pytest_asyncio.fixture
async def local_client(uploads_dir: Path) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=create_app()),
        base_url="http://test",
    ) as client:
        yield client


class TestStaticUploads:
    """Tests for GET /uploads/{key}."""

    @pytest.mark.asyncio
    async def test_creates_missing_directory(
        self,
        local_client: AsyncClient,
        uploads_dir: Path,
    ) -> None:
        assert uploads_dir.is_dir()

    @pytest.mark.asyncio
    async def test_unknown_file_is_not_found(self, local_client: AsyncClient) -> None:
        response = await local_client.get("/uploads/missing.png")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_serves_saved_file(
        self,
        local_client: AsyncClient,
        uploads_dir: Path,
        png_bytes: bytes,
    ) -> None:
        provider = LocalStorageProvider(str(uploads_dir), "http://test")
        await provider.save("abc-front.png", png_bytes, "image/png")

        response = await local_client.get("/uploads/abc-front.png")

        assert response.status_code == status.HTTP_200_OK
        assert response.content == png_bytes
        assert response.headers["content-type"] == "image/png"
        assert provider.url_for("abc-front.png") == "http://test/uploads/abc-front.png"
