"""Pydantic schemas for API requests and responses."""

from comply.schemas.auth import AuthResponse, TokenClaims, UserLogin, UserRegister, UserResponse
from comply.schemas.media import (
    PPTCreate,
    PPTResponse,
    PPTUpdate,
    VideoCreate,
    VideoResponse,
    VideoUpdate,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "TokenClaims",
    "VideoCreate",
    "VideoUpdate",
    "VideoResponse",
    "PPTCreate",
    "PPTUpdate",
    "PPTResponse",
]
