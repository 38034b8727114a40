"""JWT token handling: sign a serialized user, verify it back."""

from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import jwt
from pydantic import ValidationError as PydanticValidationError

from happy.auth.models import User
from happy.auth.schemas import UserView
from happy.config import Settings, get_settings
from happy.shared.exceptions import InvalidTokenError, TokenExpiredError
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class JWTServiceProtocol(Protocol):
    """Protocol for token operations."""

    def create_token(self, user: User | UserView) -> str: ...
    def verify_token(self, token: str) -> UserView: ...


class JWTService:
    """Signs and verifies bearer tokens whose payload is the serialized user."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    def sign(self, payload: dict[str, Any]) -> str:
        """Sign an arbitrary claims dict with the server secret."""
        claims = dict(payload)
        if self._settings.jwt_expire_minutes:
            claims["exp"] = datetime.now(timezone.utc) + timedelta(
                minutes=self._settings.jwt_expire_minutes
            )
        return jwt.encode(
            claims,
            self._settings.app_key,
            algorithm=self._settings.jwt_algorithm,
        )

    def decode(self, token: str) -> dict[str, Any]:
        """Check the signature and return the raw claims.

        Raises:
            TokenExpiredError: If the token carries a past ``exp`` claim.
            InvalidTokenError: If the token is malformed or wrongly signed.
        """
        try:
            return jwt.decode(
                token,
                self._settings.app_key,
                algorithms=[self._settings.jwt_algorithm],
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token expired")
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid token", extra={"error": str(e)})
            raise InvalidTokenError(details={"error": str(e)}) from e

    def create_token(self, user: User | UserView) -> str:
        """Issue a token for a user. No expiry unless ``jwt_expire_minutes`` is set."""
        view = user if isinstance(user, UserView) else UserView.model_validate(user)
        return self.sign(view.model_dump(mode="json"))

    def verify_token(self, token: str) -> UserView:
        """Verify a token and return the user it was issued for."""
        claims = self.decode(token)
        try:
            return UserView.model_validate(claims)
        except PydanticValidationError as e:
            raise InvalidTokenError(
                message="Token payload is not a user",
                details={"payload_keys": sorted(claims)},
            ) from e
