"""Uploaded media models: videos and presentations."""

from sqlalchemy import Column, Enum, Integer, String

from comply.database import Base
from comply.models.enums import VideoType
from comply.models.mixins import IdMixin, TimestampMixin


class StoredFileMixin:
    """Columns describing a file admitted through the upload pipeline."""

    file_url = Column(String(1024), nullable=False)  # locator, e.g. /uploads/videos/<name>
    file_name = Column(String(512), nullable=True)  # original client filename
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(255), nullable=True)


class Video(Base, IdMixin, TimestampMixin, StoredFileMixin):
    """Video metadata record."""

    __tablename__ = "videos"

    title = Column(String(500), nullable=False)
    duration = Column(String(50), nullable=False)  # "12:30"
    type = Column(
        Enum(
            VideoType,
            name="videotype",
            values_callable=lambda x: [e.value for e in x],
        ),
        nullable=False,
        index=True,
    )
    module_id = Column(String(255), nullable=True, index=True)
    module_name = Column(String(500), nullable=True)


class PPT(Base, IdMixin, TimestampMixin, StoredFileMixin):
    """Presentation metadata record."""

    __tablename__ = "ppts"

    title = Column(String(500), nullable=False)
    slides = Column(Integer, nullable=False)
    module_id = Column(String(255), nullable=False, index=True)
    module_name = Column(String(500), nullable=True)
