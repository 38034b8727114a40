"""Authentication API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from happy.auth.middleware import CurrentUserDep, get_auth_service
from happy.auth.schemas import LoginRequest, LoginResponse, UserResponse
from happy.auth.service import AuthService

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Exchange email and password for a bearer token",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    data: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    return await auth_service.login(data.email, data.password)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    responses={401: {"description": "Not authenticated"}},
)
async def get_me(current_user: CurrentUserDep) -> UserResponse:
    """Return the user the bearer token was issued for."""
    return UserResponse(user=current_user)
