"""
Custom exception classes for the application.
"""

from typing import Any


class AppException(Exception):
    """Base exception for application errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class AuthenticationError(AppException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "AUTH_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match a user."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message, "INVALID_CREDENTIALS")


class MissingCredentialsError(AuthenticationError):
    """Raised when a protected route is called without a bearer token."""

    def __init__(self, message: str = "Authentication credentials required") -> None:
        super().__init__(message, "MISSING_CREDENTIALS")


class TokenExpiredError(AuthenticationError):
    """Raised when a token has expired."""

    def __init__(
        self,
        message: str = "Token has expired",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "TOKEN_EXPIRED", details)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid."""

    def __init__(
        self,
        message: str = "Invalid token",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, "INVALID_TOKEN", details)


class NotFoundError(AppException):
    """Raised when a requested record does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str = "Resource not found",
        code: str = "NOT_FOUND",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class OrphanageNotFoundError(NotFoundError):
    """Raised when an orphanage is not found."""

    def __init__(self, orphanage_id: int) -> None:
        self.orphanage_id = orphanage_id
        super().__init__(
            f"Orphanage not found: {orphanage_id}",
            "ORPHANAGE_NOT_FOUND",
            {"orphanage_id": orphanage_id},
        )


class ImageNotFoundError(NotFoundError):
    """Raised when an image is not found."""

    def __init__(self, image_id: int) -> None:
        self.image_id = image_id
        super().__init__(
            f"Image not found: {image_id}",
            "IMAGE_NOT_FOUND",
            {"image_id": image_id},
        )


class ValidationError(AppException):
    """Raised when business validation fails (distinct from pydantic ValidationError)."""

    status_code = 400

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message, code, details)


class InvalidImageError(ValidationError):
    """Raised when an uploaded file is not an acceptable image."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details, code="INVALID_IMAGE")


class UserAlreadyExistsError(ValidationError):
    """Raised when creating a user whose email is taken."""

    def __init__(self, email: str) -> None:
        super().__init__(
            f"A user with email {email} already exists",
            {"email": email},
            code="USER_ALREADY_EXISTS",
        )


class StorageError(AppException):
    """Raised when the image storage backend fails."""

    status_code = 502

    def __init__(
        self,
        message: str,
        operation: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        super().__init__(message, "STORAGE_ERROR", {"operation": operation, **(details or {})})
