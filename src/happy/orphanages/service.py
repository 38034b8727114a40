"""
Orphanage service for business logic.

Creates, edits, approves and removes listings, keeping stored image files in
step with image rows: new files are removed if the transaction rolls back,
files of deleted rows only once the deletion has committed.
"""

from collections.abc import Sequence
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from happy.images.service import ImageFiles
from happy.images.uploads import ImageUpload
from happy.orphanages.models import Image, Orphanage
from happy.orphanages.repository import OrphanageRepository, OrphanageRepositoryProtocol
from happy.orphanages.schemas import OrphanageForm
from happy.shared.database import after_commit, after_rollback
from happy.shared.exceptions import OrphanageNotFoundError
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class OrphanageService:
    """Service for orphanage business logic."""

    def __init__(
        self,
        session: AsyncSession,
        files: ImageFiles,
        repository: OrphanageRepositoryProtocol | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Database session of the current request.
            files: Image file storage.
            repository: Orphanage repository for database operations.
        """
        self._session = session
        self._files = files
        self._repository = repository or OrphanageRepository(session)

    async def list_orphanages(self, pending: bool | None = False) -> Sequence[Orphanage]:
        """List approved orphanages, or pending ones with ``pending=True``."""
        return await self._repository.list_orphanages(pending=pending)

    async def get_orphanage(self, orphanage_id: int) -> Orphanage:
        """Get orphanage by ID."""
        orphanage = await self._repository.get_by_id(orphanage_id)
        if orphanage is None:
            raise OrphanageNotFoundError(orphanage_id)
        return orphanage

    async def _store(self, uploads: Sequence[ImageUpload]) -> list[Image]:
        keys = await self._files.store(uploads)
        if keys:
            after_rollback(self._session, partial(self._files.discard, keys))
        return [Image(path=key) for key in keys]

    async def create_orphanage(
        self,
        data: OrphanageForm,
        uploads: Sequence[ImageUpload] = (),
        pending: bool = True,
    ) -> Orphanage:
        """Create a listing. Public submissions wait for approval."""
        images = await self._store(uploads)
        orphanage = await self._repository.create(
            Orphanage(**data.model_dump(), pending=pending, images=images)
        )
        logger.info(
            "Orphanage created",
            extra={"orphanage_id": orphanage.id, "images": len(images), "pending": pending},
        )
        return orphanage

    async def update_orphanage(
        self,
        orphanage_id: int,
        data: OrphanageForm,
        uploads: Sequence[ImageUpload] = (),
    ) -> Orphanage:
        """Replace the listing's fields and append any newly uploaded images."""
        orphanage = await self.get_orphanage(orphanage_id)

        images = await self._store(uploads)
        for field, value in data.model_dump().items():
            setattr(orphanage, field, value)
        orphanage.images.extend(images)
        orphanage = await self._repository.update(orphanage)

        logger.info(
            "Orphanage updated",
            extra={"orphanage_id": orphanage.id, "new_images": len(images)},
        )
        return orphanage

    async def approve_orphanage(self, orphanage_id: int) -> Orphanage:
        """Publish a pending listing."""
        orphanage = await self.get_orphanage(orphanage_id)
        if orphanage.pending:
            orphanage.pending = False
            orphanage = await self._repository.update(orphanage)
            logger.info("Orphanage approved", extra={"orphanage_id": orphanage.id})
        return orphanage

    async def delete_orphanage(self, orphanage_id: int) -> None:
        """Delete a listing and its image rows; stored files go once the deletion commits."""
        orphanage = await self.get_orphanage(orphanage_id)
        paths = [image.path for image in orphanage.images]
        await self._repository.delete(orphanage)
        if paths:
            after_commit(self._session, partial(self._files.discard, paths))
        logger.info(
            "Orphanage deleted",
            extra={"orphanage_id": orphanage_id, "images": len(paths)},
        )
