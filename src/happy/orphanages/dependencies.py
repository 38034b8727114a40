"""
FastAPI dependencies shared by the public and admin orphanage routers.
"""

from typing import Annotated

from fastapi import Depends, File, Form, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from happy.config import Settings, get_settings
from happy.images.service import ImageFiles
from happy.images.storage import StorageProvider, get_storage_provider
from happy.images.uploads import ImageUpload, read_image_uploads
from happy.orphanages.schemas import OrphanageForm
from happy.orphanages.service import OrphanageService
from happy.shared.database import get_db_session


def get_orphanage_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    storage: Annotated[StorageProvider, Depends(get_storage_provider)],
) -> OrphanageService:
    """Dependency for orphanage service."""
    return OrphanageService(session, ImageFiles(storage))


def orphanage_form(
    name: Annotated[str, Form()],
    latitude: Annotated[str, Form()],
    longitude: Annotated[str, Form()],
    about: Annotated[str, Form()],
    instructions: Annotated[str, Form()],
    opening_hours: Annotated[str, Form()],
    open_on_weekends: Annotated[str, Form()],
) -> OrphanageForm:
    """Collect the listing fields from multipart/urlencoded form data."""
    try:
        return OrphanageForm.model_validate(
            {
                "name": name,
                "latitude": latitude,
                "longitude": longitude,
                "about": about,
                "instructions": instructions,
                "opening_hours": opening_hours,
                "open_on_weekends": open_on_weekends,
            }
        )
    except PydanticValidationError as e:
        errors = [{**error, "loc": ("body", *error["loc"])} for error in e.errors()]
        raise RequestValidationError(errors) from e


async def image_uploads(
    settings: Annotated[Settings, Depends(get_settings)],
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> list[ImageUpload]:
    """Validate the repeated ``images`` file parts."""
    return await read_image_uploads(images, settings.max_image_bytes)


OrphanageServiceDep = Annotated[OrphanageService, Depends(get_orphanage_service)]
OrphanageFormDep = Annotated[OrphanageForm, Depends(orphanage_form)]
ImageUploadsDep = Annotated[list[ImageUpload], Depends(image_uploads)]
