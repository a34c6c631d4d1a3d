"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from comply.api.dependencies import get_auth_service, get_current_user
from comply.api.errors import http_error
from comply.exceptions import (
    DuplicateEmailError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
)
from comply.models.user import User
from comply.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from comply.services.auth import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    try:
        return auth_service.register(user_data)
    except DuplicateEmailError as e:
        raise http_error(e) from None


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    try:
        return auth_service.login(credentials.email, credentials.password)
    except (InvalidCredentialsError, InactiveAccountError) as e:
        raise http_error(e) from None


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get current user information."""
    try:
        return auth_service.get_profile(current_user.id)
    except NotFoundError as e:
        raise http_error(e) from None


@router.post("/logout")
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return {"message": "Logged out successfully"}
