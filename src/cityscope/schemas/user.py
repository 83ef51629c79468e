"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from cityscope.models.user import BIO_MAX_LENGTH, LOCATION_MAX_LENGTH, USERNAME_MAX_LENGTH

from .common import CamelModel

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128


class RegisterRequest(CamelModel):
    """Schema for account registration."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
        description="Unique, case-sensitive handle",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    )
    location: str | None = Field(None, max_length=LOCATION_MAX_LENGTH)
    bio: str | None = Field(None, max_length=BIO_MAX_LENGTH)


class LoginRequest(CamelModel):
    """Schema for login submissions."""

    username: str
    password: str


class UserResponse(CamelModel):
    """Public profile fields of a user."""

    id: int
    username: str
    bio: str | None = None
    location: str | None = None
    created_at: datetime


class UserEnvelope(CamelModel):
    """Wrapper used by endpoints returning a single user."""

    user: UserResponse


class AuthResponse(CamelModel):
    """Response returned after successful registration or login."""

    token: str = Field(..., description="Bearer access token")
    user: UserResponse


class ProfileUpdateRequest(CamelModel):
    """Schema for updating user profile information.

    Fields left out of the request body are not changed. Sending an empty
    string clears the field.
    """

    bio: str | None = Field(None, description="Short bio (up to 160 characters)")
    location: str | None = Field(None, description="Free-text neighborhood")
