"""
Storage backends for uploaded orphanage images.
"""

import re
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

import aioboto3
import anyio
from botocore.exceptions import ClientError

from happy.config import Settings, get_settings
from happy.shared.exceptions import StorageError
from happy.shared.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def build_image_key(filename: str | None) -> str:
    """Build a unique storage key that keeps a readable form of the upload name."""
    base = _UNSAFE_CHARS.sub("-", (filename or "").rsplit("/", 1)[-1]).strip("-.")
    return f"{uuid.uuid4().hex}-{base or 'image'}"


class StorageProvider(ABC):
    """Abstract storage provider interface."""

    @abstractmethod
    async def save(self, key: str, content: bytes, content_type: str) -> str:
        """Store content under key and return the key."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a stored object. Returns False if it did not exist."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether an object is stored under key."""

    @abstractmethod
    def url_for(self, key: str) -> str:
        """Public URL of a stored object."""


class LocalStorageProvider(StorageProvider):
    """Keeps images on the local disk; the app serves them under /uploads."""

    def __init__(self, directory: str, base_url: str) -> None:
        self.directory = anyio.Path(directory)
        self.base_url = base_url.rstrip("/")

    def _path(self, key: str) -> anyio.Path:
        # Keys are generated by build_image_key; reject anything that walks out of the directory.
        if "/" in key or "\\" in key or key in {"", ".", ".."}:
            raise StorageError(
                message="Invalid storage key",
                operation="resolve",
                details={"key": key},
            )
        return self.directory / key

    async def save(self, key: str, content: bytes, content_type: str) -> str:
        path = self._path(key)
        try:
            await self.directory.mkdir(parents=True, exist_ok=True)
            await path.write_bytes(content)
        except OSError as e:
            logger.error("Failed to write image", extra={"key": key, "error": str(e)})
            raise StorageError(
                message=f"Failed to store file: {e}",
                operation="upload",
                details={"key": key},
            ) from e
        logger.info("Image stored on disk", extra={"key": key, "bytes": len(content)})
        return key

    async def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            await path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Failed to delete image", extra={"key": key, "error": str(e)})
            raise StorageError(
                message=f"Failed to delete file: {e}",
                operation="delete",
                details={"key": key},
            ) from e
        logger.info("Image deleted from disk", extra={"key": key})
        return True

    async def exists(self, key: str) -> bool:
        return await self._path(key).is_file()

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/uploads/{key}"


class S3StorageProvider(StorageProvider):
    """AWS S3 storage provider implementation."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.public_base_url = (
            public_base_url or f"https://{bucket_name}.s3.{region}.amazonaws.com"
        ).rstrip("/")

    def _get_session(self) -> aioboto3.Session:
        """Get aioboto3 session."""
        return aioboto3.Session(
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            region_name=self.region,
        )

    async def save(self, key: str, content: bytes, content_type: str) -> str:
        session = self._get_session()
        try:
            async with session.client("s3") as s3:
                await s3.put_object(
                    Bucket=self.bucket_name,
                    Key=key,
                    Body=content,
                    ContentType=content_type,
                )
        except ClientError as e:
            logger.error(
                "Failed to upload file to S3",
                extra={"bucket": self.bucket_name, "key": key, "error": str(e)},
            )
            raise StorageError(
                message=f"Failed to upload file: {e}",
                operation="upload",
                details={"bucket": self.bucket_name, "key": key},
            ) from e
        logger.info("File uploaded to S3", extra={"bucket": self.bucket_name, "key": key})
        return key

    async def delete(self, key: str) -> bool:
        session = self._get_session()
        try:
            async with session.client("s3") as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error(
                "Failed to delete file from S3",
                extra={"bucket": self.bucket_name, "key": key, "error": str(e)},
            )
            raise StorageError(
                message=f"Failed to delete file: {e}",
                operation="delete",
                details={"bucket": self.bucket_name, "key": key},
            ) from e
        logger.info("File deleted from S3", extra={"bucket": self.bucket_name, "key": key})
        return True

    async def exists(self, key: str) -> bool:
        session = self._get_session()
        try:
            async with session.client("s3") as s3:
                await s3.head_object(Bucket=self.bucket_name, Key=key)
                return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in {"404", "NoSuchKey", "NotFound"}:
                return False
            raise StorageError(
                message=f"Failed to check file: {e}",
                operation="head",
                details={"bucket": self.bucket_name, "key": key},
            ) from e

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"


class InMemoryStorageProvider(StorageProvider):
    """In-memory storage provider for testing."""

    def __init__(self, base_url: str = "http://localhost/mock-storage") -> None:
        self.base_url = base_url.rstrip("/")
        self._storage: dict[str, tuple[bytes, str]] = {}

    async def save(self, key: str, content: bytes, content_type: str) -> str:
        self._storage[key] = (content, content_type)
        return key

    async def delete(self, key: str) -> bool:
        return self._storage.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self._storage

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def get_content(self, key: str) -> Optional[bytes]:
        """Get file content (for testing)."""
        item = self._storage.get(key)
        return item[0] if item else None

    @property
    def keys(self) -> list[str]:
        return list(self._storage)


def create_storage_provider(settings: Settings) -> StorageProvider:
    """Build the storage provider selected by settings."""
    if settings.storage_backend == "s3":
        return S3StorageProvider(
            bucket_name=settings.s3_bucket_name,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            public_base_url=settings.s3_public_base_url,
        )
    return LocalStorageProvider(settings.uploads_dir, settings.public_base_url)


@lru_cache(maxsize=1)
def get_storage_provider() -> StorageProvider:
    """FastAPI dependency returning the process-wide storage provider."""
    return create_storage_provider(get_settings())
