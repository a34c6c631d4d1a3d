"""Enums for model fields."""

from enum import Enum


class Role(str, Enum):
    """User roles, ordered from least to most privileged."""

    USER = "user"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        """Position of this role in the privilege hierarchy."""
        return _ROLE_RANKS[self]

    def satisfies(self, required: "Role") -> bool:
        """Check if this role meets or exceeds the required role."""
        return self.rank >= required.rank


_ROLE_RANKS = {Role.USER: 0, Role.ADMIN: 1}


class VideoType(str, Enum):
    """Whether a video belongs to a course module or the basic library."""

    MODULE = "module"
    BASIC = "basic"


class UploadCategory(str, Enum):
    """Upload classification that selects validation rules and storage location."""

    VIDEO = "video"
    PRESENTATION = "presentation"
