"""
Validation of multipart image uploads.
"""

from dataclasses import dataclass

from fastapi import UploadFile

from happy.shared.exceptions import InvalidImageError

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image that passed validation, read fully into memory."""

    filename: str
    content_type: str
    content: bytes


async def read_image_upload(file: UploadFile, max_bytes: int) -> ImageUpload:
    """Read one uploaded file, rejecting non-images and oversized files.

    Raises:
        InvalidImageError: If the file type is not allowed, the file is empty,
            or it is larger than ``max_bytes``.
    """
    filename = file.filename or "image"
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidImageError(
            f"Unsupported image type for {filename}",
            {"filename": filename, "content_type": content_type or None,
             "allowed": sorted(ALLOWED_CONTENT_TYPES)},
        )

    # Read one byte past the limit to detect oversized files without buffering them whole.
    content = await file.read(max_bytes + 1)
    if not content:
        raise InvalidImageError(f"Empty file uploaded: {filename}", {"filename": filename})
    if len(content) > max_bytes:
        raise InvalidImageError(
            f"Image {filename} exceeds {max_bytes} bytes",
            {"filename": filename, "max_bytes": max_bytes},
        )
    return ImageUpload(filename=filename, content_type=content_type, content=content)


async def read_image_uploads(files: list[UploadFile] | None, max_bytes: int) -> list[ImageUpload]:
    """Validate every file before any of them is stored."""
    return [await read_image_upload(file, max_bytes) for file in files or []]
