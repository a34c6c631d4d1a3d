"""Application error types.

Services raise these; the API layer translates them into HTTP responses so
that no internal detail leaks to the client.
"""


class ComplyError(Exception):
    """Base exception for all application errors."""

    pass


class InvalidCredentialsError(ComplyError):
    """Raised when an email/password pair does not authenticate.

    Covers both an unknown email and a wrong password.
    """

    def __init__(self) -> None:
        super().__init__("Incorrect email or password")


class InactiveAccountError(ComplyError):
    """Raised when the password is correct but the account is deactivated."""

    def __init__(self) -> None:
        super().__init__("User account is inactive")


class DuplicateEmailError(ComplyError):
    """Raised when registering an email that already exists."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already registered")


class UnauthenticatedError(ComplyError):
    """Raised when a bearer token is missing, invalid or expired."""

    def __init__(self, message: str = "Invalid authentication credentials"):
        super().__init__(message)


class ForbiddenError(ComplyError):
    """Raised when a valid token's role does not satisfy the required role."""

    def __init__(self, required_role: str):
        self.required_role = required_role
        super().__init__("You don't have permission to perform this action")


class NotFoundError(ComplyError):
    """Raised when an entity lookup misses."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationRejectedError(ComplyError):
    """Raised when an uploaded file fails the category's type rules."""

    pass


class SizeExceededError(ComplyError):
    """Raised when an upload is larger than the category's limit."""

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")


class StorageFailureError(ComplyError):
    """Raised when durable storage cannot be written or read."""

    pass
