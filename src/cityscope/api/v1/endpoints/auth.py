# src/cityscope/api/v1/endpoints/auth.py
"""Authentication endpoints for the Cityscope API."""

from __future__ import annotations

from fastapi import APIRouter, status

from cityscope.api.v1.dependencies import CurrentIdentityDep, UserServiceDep
from cityscope.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)
from cityscope.services.identity import issue_credential

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
)
async def register_user(payload: RegisterRequest, users: UserServiceDep) -> AuthResponse:
    """Create an account and return a bearer token for it."""
    user = users.register(
        username=payload.username,
        password=payload.password,
        location=payload.location,
        bio=payload.bio,
    )
    return AuthResponse(token=issue_credential(user), user=UserResponse.model_validate(user))


@router.post(
    "/login",
    summary="Authenticate with username and password",
    response_model=AuthResponse,
)
async def login_user(payload: LoginRequest, users: UserServiceDep) -> AuthResponse:
    """Exchange valid credentials for a bearer token."""
    user = users.authenticate(payload.username, payload.password)
    return AuthResponse(token=issue_credential(user), user=UserResponse.model_validate(user))


@router.get("/me", summary="Return the authenticated user", response_model=UserEnvelope)
async def get_me(identity: CurrentIdentityDep, users: UserServiceDep) -> UserEnvelope:
    """Return the profile of the caller identified by the bearer token."""
    user = users.get_by_username(identity.username)
    return UserEnvelope(user=UserResponse.model_validate(user))
