"""SQLAlchemy models."""

from comply.models.media import PPT, Video
from comply.models.user import User

__all__ = [
    "User",
    "Video",
    "PPT",
]
