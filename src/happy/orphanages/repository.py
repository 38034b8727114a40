"""
Orphanage repository for database operations.
"""

from typing import Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happy.orphanages.models import Orphanage
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class OrphanageRepositoryProtocol(Protocol):
    """Protocol for orphanage repository operations."""

    async def create(self, orphanage: Orphanage) -> Orphanage: ...
    async def get_by_id(self, orphanage_id: int) -> Orphanage | None: ...
    async def list_orphanages(self, pending: bool | None = False) -> Sequence[Orphanage]: ...
    async def update(self, orphanage: Orphanage) -> Orphanage: ...
    async def delete(self, orphanage: Orphanage) -> None: ...


class OrphanageRepository:
    """Repository for orphanage database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self._session = session

    async def create(self, orphanage: Orphanage) -> Orphanage:
        """Insert a new orphanage together with any attached images."""
        self._session.add(orphanage)
        await self._session.flush()
        await self._session.refresh(orphanage)
        logger.info("Created orphanage", extra={"orphanage_id": orphanage.id})
        return orphanage

    async def get_by_id(self, orphanage_id: int) -> Orphanage | None:
        """Get orphanage by ID; images load eagerly."""
        return await self._session.get(Orphanage, orphanage_id)

    async def list_orphanages(self, pending: bool | None = False) -> Sequence[Orphanage]:
        """List orphanages ordered by ID.

        Args:
            pending: Approval filter. ``None`` returns every listing.
        """
        query = select(Orphanage).order_by(Orphanage.id)
        if pending is not None:
            query = query.where(Orphanage.pending.is_(pending))
        result = await self._session.execute(query)
        return result.scalars().all()

    async def update(self, orphanage: Orphanage) -> Orphanage:
        """Flush pending changes on an attached orphanage."""
        await self._session.flush()
        await self._session.refresh(orphanage)
        logger.info("Updated orphanage", extra={"orphanage_id": orphanage.id})
        return orphanage

    async def delete(self, orphanage: Orphanage) -> None:
        """Delete an orphanage; its images go with it."""
        await self._session.delete(orphanage)
        await self._session.flush()
        logger.info("Deleted orphanage", extra={"orphanage_id": orphanage.id})
