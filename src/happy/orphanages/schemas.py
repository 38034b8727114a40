"""
Pydantic schemas for the orphanage API.

Defines the form payload for create/update and the views returned to clients.
"""

from pydantic import BaseModel, ConfigDict, Field

from happy.images.storage import StorageProvider
from happy.orphanages.models import Image, Orphanage

ABOUT_MAX_LENGTH = 300


class OrphanageForm(BaseModel):
    """Fields submitted (as multipart form data) when creating or editing a listing."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, description="Orphanage name")
    latitude: float = Field(..., ge=-90, le=90, description="Map latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Map longitude")
    about: str = Field(
        ...,
        min_length=1,
        max_length=ABOUT_MAX_LENGTH,
        description="Short description shown on the listing page",
    )
    instructions: str = Field(..., min_length=1, description="Visiting instructions")
    opening_hours: str = Field(..., min_length=1, max_length=255, description="Visiting hours")
    open_on_weekends: bool = Field(..., description="Whether visits are accepted on weekends")


class ImageView(BaseModel):
    """An image as the front-end renders it."""

    id: int
    url: str

    @classmethod
    def from_model(cls, image: Image, storage: StorageProvider) -> "ImageView":
        return cls(id=image.id, url=storage.url_for(image.path))


class OrphanageView(BaseModel):
    """Serialized orphanage listing."""

    id: int
    name: str
    latitude: float
    longitude: float
    about: str
    instructions: str
    opening_hours: str
    open_on_weekends: bool
    pending: bool
    images: list[ImageView] = Field(default_factory=list)

    @classmethod
    def from_model(cls, orphanage: Orphanage, storage: StorageProvider) -> "OrphanageView":
        """Render an ORM orphanage, resolving image URLs through the storage backend."""
        return cls(
            id=orphanage.id,
            name=orphanage.name,
            latitude=orphanage.latitude,
            longitude=orphanage.longitude,
            about=orphanage.about,
            instructions=orphanage.instructions,
            opening_hours=orphanage.opening_hours,
            open_on_weekends=orphanage.open_on_weekends,
            pending=orphanage.pending,
            images=[ImageView.from_model(image, storage) for image in orphanage.images],
        )


class OrphanageResponse(BaseModel):
    """Envelope for a single orphanage."""

    orphanage: OrphanageView


class OrphanageListResponse(BaseModel):
    """Envelope for a list of orphanages."""

    orphanages: list[OrphanageView]


class ErrorDetail(BaseModel):
    """Error detail schema."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    detail: ErrorDetail
