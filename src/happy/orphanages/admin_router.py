"""
Admin orphanage API router.

Every route requires a bearer token issued by ``POST /login``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from happy.auth.middleware import CurrentUserDep, get_current_user
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

router = APIRouter(
    prefix="/admin/orphanages",
    tags=["admin"],
    dependencies=[Depends(get_current_user)],
    responses={401: {"model": ErrorResponse, "description": "Not authenticated"}},
)

StorageDep = Annotated[StorageProvider, Depends(get_storage_provider)]
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Orphanage not found"}}


@router.get("", response_model=OrphanageListResponse, summary="List approved orphanages")
async def list_approved(
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageListResponse:
    orphanages = await service.list_orphanages(pending=False)
    return OrphanageListResponse(
        orphanages=[OrphanageView.from_model(o, storage) for o in orphanages]
    )


@router.get("/pending", response_model=OrphanageListResponse, summary="List pending orphanages")
async def list_pending(
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageListResponse:
    orphanages = await service.list_orphanages(pending=True)
    return OrphanageListResponse(
        orphanages=[OrphanageView.from_model(o, storage) for o in orphanages]
    )


@router.get(
    "/{orphanage_id}",
    response_model=OrphanageResponse,
    responses=_NOT_FOUND,
    summary="Get one orphanage",
)
async def get_orphanage(
    orphanage_id: int,
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageResponse:
    orphanage = await service.get_orphanage(orphanage_id)
    return OrphanageResponse(orphanage=OrphanageView.from_model(orphanage, storage))


@router.put(
    "/{orphanage_id}",
    response_model=OrphanageResponse,
    responses={
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Invalid image upload"},
        422: {"description": "Validation error"},
    },
    summary="Update an orphanage",
)
async def update_orphanage(
    orphanage_id: int,
    data: OrphanageFormDep,
    uploads: ImageUploadsDep,
    current_user: CurrentUserDep,
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageResponse:
    """Replace every field of a listing; uploaded images are added to the existing ones."""
    logger.info(
        "Updating orphanage",
        extra={"user_id": current_user.id, "orphanage_id": orphanage_id, "images": len(uploads)},
    )
    orphanage = await service.update_orphanage(orphanage_id, data, uploads)
    return OrphanageResponse(orphanage=OrphanageView.from_model(orphanage, storage))


@router.patch(
    "/{orphanage_id}/approve",
    response_model=OrphanageResponse,
    responses=_NOT_FOUND,
    summary="Approve a pending orphanage",
)
async def approve_orphanage(
    orphanage_id: int,
    current_user: CurrentUserDep,
    service: OrphanageServiceDep,
    storage: StorageDep,
) -> OrphanageResponse:
    logger.info(
        "Approving orphanage",
        extra={"user_id": current_user.id, "orphanage_id": orphanage_id},
    )
    orphanage = await service.approve_orphanage(orphanage_id)
    return OrphanageResponse(orphanage=OrphanageView.from_model(orphanage, storage))


@router.delete(
    "/{orphanage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
    summary="Delete an orphanage",
)
async def delete_orphanage(
    orphanage_id: int,
    current_user: CurrentUserDep,
    service: OrphanageServiceDep,
) -> Response:
    logger.info(
        "Deleting orphanage",
        extra={"user_id": current_user.id, "orphanage_id": orphanage_id},
    )
    await service.delete_orphanage(orphanage_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
