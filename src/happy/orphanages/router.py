"""
Public orphanage API router.

Anyone can browse approved listings and submit a new one for approval.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from happy.images.storage import StorageProvider, get_storage_provider
from happy.orphanages.dependencies import (
    ImageUploadsDep,
    OrphanageFormDep,
    OrphanageServiceDep,
)
from happy.orphanages.schemas import (
    ErrorResponse,
    OrphanageListResponse,
    OrphanageResponse,
    OrphanageView,
)
from happy.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/orphanages", tags=["orphanages"])

StorageDep = Annotated[StorageProvider, Depends(get_storage_provider)]


@router.get(
    "",
    response_model=OrphanageListResponse,
    summary="List approved orphanages",
)
async def list_orphanages(
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageListResponse:
    orphanages = await service.list_orphanages(pending=False)
    return OrphanageListResponse(
        orphanages=[OrphanageView.from_model(o, storage) for o in orphanages]
    )


@router.get(
    "/{orphanage_id}",
    response_model=OrphanageResponse,
    responses={404: {"model": ErrorResponse, "description": "Orphanage not found"}},
    summary="Get one orphanage",
)
async def get_orphanage(
    orphanage_id: int,
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageResponse:
    """Return one listing by ID, whether or not it has been approved yet."""
    orphanage = await service.get_orphanage(orphanage_id)
    return OrphanageResponse(orphanage=OrphanageView.from_model(orphanage, storage))


@router.post(
    "",
    response_model=OrphanageResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid image upload"},
        422: {"description": "Validation error"},
    },
    summary="Submit an orphanage",
)
async def create_orphanage(
    data: OrphanageFormDep,
    uploads: ImageUploadsDep,
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageResponse:
    """Create a listing from multipart form data. It stays pending until approved."""
    logger.info(
        "Orphanage submitted",
        extra={"orphanage_name": data.name, "images": len(uploads)},
    )
    orphanage = await service.create_orphanage(data, uploads, pending=True)
    return OrphanageResponse(orphanage=OrphanageView.from_model(orphanage, storage))
