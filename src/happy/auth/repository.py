"""
User repository for database operations.
"""

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happy.auth.models import User


class UserRepositoryProtocol(Protocol):
    """Protocol for user repository operations."""

    async def get_by_id(self, user_id: int) -> User | None: ...
    async def get_by_email(self, email: str) -> User | None: ...
    async def create(self, user: User) -> User: ...


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> User | None:
        """Get user by ID."""
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive: emails are stored lower-cased)."""
        result = await self._session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        """Persist a new user."""
        user.email = user.email.strip().lower()
        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)
        return user
