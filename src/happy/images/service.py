"""
Image services: stored upload bytes and image rows kept in step.
"""

from collections.abc import Iterable
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from happy.images.repository import ImageRepository
from happy.images.storage import StorageProvider, build_image_key
from happy.images.uploads import ImageUpload
from happy.shared.database import after_commit
from happy.shared.exceptions import ImageNotFoundError, StorageError
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class ImageFiles:
    """Writes and removes image files through a storage provider."""

    def __init__(self, storage: StorageProvider) -> None:
        self._storage = storage

    async def store(self, uploads: Iterable[ImageUpload]) -> list[str]:
        """Store validated uploads and return their keys.

        If any write fails, files already written by this call are removed
        before the error propagates.
        """
        keys: list[str] = []
        try:
            for upload in uploads:
                key = build_image_key(upload.filename)
                await self._storage.save(key, upload.content, upload.content_type)
                keys.append(key)
        except StorageError:
            await self.discard(keys)
            raise
        return keys

    async def discard(self, keys: Iterable[str]) -> None:
        """Remove stored files whose rows are gone (or never got written).

        A failed removal leaves an unreferenced file behind; it is logged, not raised.
        """
        for key in keys:
            try:
                await self._storage.delete(key)
            except StorageError as e:
                logger.warning(
                    "Could not remove stored image",
                    extra={"key": key, "error": e.message},
                )


class ImageService:
    """Service for deleting single images."""

    def __init__(
        self,
        session: AsyncSession,
        files: ImageFiles,
        repository: ImageRepository | None = None,
    ) -> None:
        self._session = session
        self._files = files
        self._repository = repository or ImageRepository(session)

    async def delete_image(self, image_id: int) -> None:
        """Delete an image row; its stored file goes once the deletion commits."""
        image = await self._repository.get_by_id(image_id)
        if image is None:
            raise ImageNotFoundError(image_id)

        path = image.path
        await self._repository.delete(image)
        after_commit(self._session, partial(self._files.discard, [path]))
        logger.info("Image removed", extra={"image_id": image_id})
