"""Admin image API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from happy.auth.middleware import CurrentUserDep
from happy.images.service import ImageFiles, ImageService
from happy.images.storage import StorageProvider, get_storage_provider
from happy.shared.database import get_db_session
from happy.shared.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/images", tags=["admin"])


def get_image_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    storage: Annotated[StorageProvider, Depends(get_storage_provider)],
) -> ImageService:
    """Dependency for image service."""
    return ImageService(session, ImageFiles(storage))


@router.delete(
    "/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an image",
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Image not found"},
    },
)
async def delete_image(
    image_id: int,
    current_user: CurrentUserDep,
    service: Annotated[ImageService, Depends(get_image_service)],
) -> Response:
    """Detach an image from its orphanage and delete the stored file."""
    logger.info("Deleting image", extra={"user_id": current_user.id, "image_id": image_id})
    await service.delete_image(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
