"""
Authentication dependency for bearer-token protected routes.

This module exposes:
- get_auth_service
- get_current_user
- CurrentUserDep (FastAPI dependency alias)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from happy.auth.schemas import UserView
from happy.auth.service import AuthService
from happy.config import Settings, get_settings
from happy.shared.database import get_db_session
from happy.shared.exceptions import AuthenticationError, MissingCredentialsError
from happy.shared.logging import get_logger

logger = get_logger(__name__)
security = HTTPBearer(auto_error=False)


def get_auth_service(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Dependency for the authentication service."""
    return AuthService(session=session, settings=settings)


def _unauthorized(exc: AuthenticationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": exc.code, "message": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserView:
    """Resolve the user behind the request's bearer token."""
    if credentials is None:
        logger.warning(
            "Missing authentication credentials",
            extra={
                "endpoint": str(request.url.path),
                "method": request.method,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        raise _unauthorized(MissingCredentialsError())

    try:
        return await auth_service.authenticate_token(credentials.credentials)
    except AuthenticationError as e:
        logger.warning(
            "Rejected bearer token",
            extra={
                "endpoint": str(request.url.path),
                "method": request.method,
                "code": e.code,
            },
        )
        raise _unauthorized(e) from e


CurrentUserDep = Annotated[UserView, Depends(get_current_user)]
