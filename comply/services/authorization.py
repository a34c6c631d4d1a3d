"""Role-based access policy."""

from comply.exceptions import ForbiddenError
from comply.models.enums import Role
from comply.schemas.auth import TokenClaims


def authorize(claims: TokenClaims, required_role: Role) -> bool:
    """Check if verified claims satisfy the role an action requires."""
    return claims.role.satisfies(required_role)


def ensure_authorized(claims: TokenClaims, required_role: Role) -> None:
    """Raise ForbiddenError unless the claims satisfy the required role."""
    if not authorize(claims, required_role):
        raise ForbiddenError(required_role.value)
