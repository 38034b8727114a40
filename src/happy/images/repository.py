"""
Image repository for database operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from happy.orphanages.models import Image, Orphanage
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class ImageRepository:
    """Repository for image database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, image_id: int) -> Image | None:
        """Get image by ID."""
        return await self._session.get(Image, image_id)

    async def delete(self, image: Image) -> None:
        """Detach an image from its orphanage; the delete-orphan cascade removes the row."""
        orphanage = await self._session.get(Orphanage, image.orphanage_id)
        if orphanage is not None and image in orphanage.images:
            orphanage.images.remove(image)
        else:
            await self._session.delete(image)
        await self._session.flush()
        logger.info(
            "Deleted image",
            extra={"image_id": image.id, "orphanage_id": image.orphanage_id},
        )
