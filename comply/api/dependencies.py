"""FastAPI dependencies for authentication, authorization and services."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from comply.api.errors import http_error
from comply.database import get_db
from comply.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from comply.models.enums import Role
from comply.models.user import User
from comply.schemas.auth import TokenClaims
from comply.services.auth import AuthService, CredentialStore, TokenService, get_token_service
from comply.services.authorization import ensure_authorized
from comply.services.media_service import PPTService, VideoService
from comply.services.storage import UploadStorage, get_upload_storage

security = HTTPBearer(auto_error=False)


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Authenticate the request from its bearer token."""
    if credentials is None or not credentials.credentials.strip():
        raise http_error(UnauthenticatedError("Not authenticated"))

    claims = tokens.decode_access_token(credentials.credentials)
    if claims is None:
        raise http_error(UnauthenticatedError())
    return claims


def get_current_user(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    try:
        user = CredentialStore(db).get_by_id(claims.sub)
    except NotFoundError:
        raise http_error(UnauthenticatedError("User not found")) from None

    if not user.is_active:
        raise http_error(UnauthenticatedError("User account is inactive"))
    return user


def require_role(role: Role) -> Callable[..., User]:
    """Build a guard that authorizes an authenticated user for a role."""

    def role_guard(
        current_user: Annotated[User, Depends(get_current_user)],
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> User:
        try:
            ensure_authorized(claims, role)
        except ForbiddenError as e:
            raise http_error(e) from None
        return current_user

    return role_guard


require_admin = require_role(Role.ADMIN)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, tokens=tokens)


def get_video_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_upload_storage)],
) -> VideoService:
    """Get video service with dependencies."""
    return VideoService(db, storage)


def get_ppt_service(
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[UploadStorage, Depends(get_upload_storage)],
) -> PPTService:
    """Get presentation service with dependencies."""
    return PPTService(db, storage)
