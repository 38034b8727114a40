"""
Authentication service: password login and token verification.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from happy.auth.jwt import JWTService, JWTServiceProtocol
from happy.auth.models import User
from happy.auth.passwords import UNKNOWN_USER_HASH, hash_password, verify_password
from happy.auth.repository import UserRepository, UserRepositoryProtocol
from happy.auth.schemas import LoginResponse, UserCreate, UserView
from happy.config import Settings, get_settings
from happy.shared.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    UserAlreadyExistsError,
)
from happy.shared.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        jwt_service: JWTServiceProtocol | None = None,
        user_repository: UserRepositoryProtocol | None = None,
    ) -> None:
        """Initialize authentication service.

        Args:
            session: Database session.
            settings: Application settings.
            jwt_service: JWT service for token operations.
            user_repository: User repository for database operations.
        """
        self._settings = settings or get_settings()
        self._session = session
        self._jwt_service = jwt_service or JWTService(self._settings)
        self._user_repository = user_repository or UserRepository(session)

    async def login(self, email: str, password: str) -> LoginResponse:
        """Check credentials and issue a token.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong.
        """
        user = await self._user_repository.get_by_email(email)
        # Unknown emails run the same key derivation as known ones
        encoded = user.password_hash if user is not None else UNKNOWN_USER_HASH
        if not verify_password(password, encoded) or user is None:
            logger.warning("Login failed", extra={"email": email})
            raise InvalidCredentialsError()

        view = UserView.model_validate(user)
        token = self._jwt_service.create_token(view)

        logger.info("User authenticated", extra={"user_id": user.id})
        return LoginResponse(user=view, token=token)

    async def authenticate_token(self, token: str) -> UserView:
        """Verify a bearer token and make sure its user still exists.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or its user is gone.
        """
        claimed = self._jwt_service.verify_token(token)
        user = await self._user_repository.get_by_id(claimed.id)
        if user is None:
            raise InvalidTokenError(
                message="User not found",
                details={"user_id": claimed.id},
            )
        return UserView.model_validate(user)

    async def create_user(self, data: UserCreate) -> UserView:
        """Create a dashboard user with a hashed password."""
        if await self._user_repository.get_by_email(data.email) is not None:
            raise UserAlreadyExistsError(data.email)

        user = await self._user_repository.create(
            User(
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
            )
        )
        logger.info("User created", extra={"user_id": user.id})
        return UserView.model_validate(user)
