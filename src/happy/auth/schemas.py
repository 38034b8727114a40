"""
Pydantic schemas for authentication.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserView(BaseModel):
    """Serialized user: the token payload and the body of user responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="User display name")
    email: str = Field(..., description="User email")


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint."""

    email: EmailStr = Field(..., description="User email")
    password: str = Field(..., min_length=1, description="Plaintext password")


class LoginResponse(BaseModel):
    """Successful login: the user and a bearer token for later requests."""

    user: UserView
    token: str = Field(..., description="Signed bearer token")


class UserResponse(BaseModel):
    """Envelope for a single user."""

    user: UserView


class UserCreate(BaseModel):
    """Fields needed to create a dashboard user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=256)
