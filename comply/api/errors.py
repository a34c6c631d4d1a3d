"""Translation of service errors into HTTP responses."""

from fastapi import HTTPException, status

from comply.exceptions import (
    ComplyError,
    DuplicateEmailError,
    ForbiddenError,
    InactiveAccountError,
    InvalidCredentialsError,
    NotFoundError,
    SizeExceededError,
    StorageFailureError,
    UnauthenticatedError,
    ValidationRejectedError,
)

_STATUS_CODES: dict[type[ComplyError], int] = {
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    InactiveAccountError: status.HTTP_401_UNAUTHORIZED,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationRejectedError: status.HTTP_400_BAD_REQUEST,
    SizeExceededError: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    StorageFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_error(exc: ComplyError) -> HTTPException:
    """Build the HTTPException the client sees for a service error."""
    status_code = _STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=status_code, detail=str(exc), headers=headers)
