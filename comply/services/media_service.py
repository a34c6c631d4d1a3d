"""Metadata services for uploaded videos and presentations."""

import logging
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from comply.exceptions import NotFoundError
from comply.models.enums import UploadCategory, VideoType
from comply.models.media import PPT, Video
from comply.services.storage import IncomingUpload, StoredFile, UploadStorage

logger = logging.getLogger(__name__)

MediaT = TypeVar("MediaT", Video, PPT)


class MediaService(Generic[MediaT]):
    """CRUD over a media table whose rows point at admitted files.

    Deleting a record leaves its stored file in place.
    """

    model: type[MediaT]
    entity_name: str
    category: UploadCategory

    def __init__(self, db: Session, storage: UploadStorage):
        self.db = db
        self.storage = storage

    def get(self, media_id: str) -> MediaT:
        record = self.db.get(self.model, media_id)
        if record is None:
            raise NotFoundError(self.entity_name, media_id)
        return record

    def _query(self):
        return self.db.query(self.model).order_by(self.model.created_at.desc())

    @staticmethod
    def _attach(record: MediaT, stored: StoredFile) -> None:
        record.file_url = stored.locator
        record.file_name = stored.original_filename
        record.file_size = stored.size_bytes
        record.mime_type = stored.mime_type

    def _commit(self, record: MediaT, stored: StoredFile | None) -> MediaT:
        # A file admitted for a row that never got written would be unreachable
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            if stored is not None:
                self.storage.discard(stored.locator)
            raise
        self.db.refresh(record)
        return record

    def create(self, data: BaseModel, upload: IncomingUpload) -> MediaT:
        """Admit the file, then record its metadata."""
        stored = self.storage.admit(upload, self.category)
        record = self.model(**data.model_dump())
        self._attach(record, stored)
        self.db.add(record)
        record = self._commit(record, stored)
        logger.info(f"Created {self.entity_name} {record.id} at {record.file_url}")
        return record

    def update(
        self,
        media_id: str,
        data: BaseModel,
        upload: IncomingUpload | None = None,
    ) -> MediaT:
        """Apply supplied fields; a new file replaces the stored locator."""
        record = self.get(media_id)
        stored = self.storage.admit(upload, self.category) if upload is not None else None
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(record, field, value)
        if stored is not None:
            self._attach(record, stored)
        return self._commit(record, stored)

    def delete(self, media_id: str) -> None:
        record = self.get(media_id)
        self.db.delete(record)
        self.db.commit()
        logger.info(f"Deleted {self.entity_name} {media_id}")


class VideoService(MediaService[Video]):
    """Service for video metadata."""

    model = Video
    entity_name = "Video"
    category = UploadCategory.VIDEO

    def list_all(
        self,
        video_type: VideoType | None = None,
        module_id: str | None = None,
    ) -> list[Video]:
        """List videos; a module filter takes precedence over a type filter."""
        query = self._query()
        if module_id:
            query = query.filter(Video.module_id == module_id)
        elif video_type is not None:
            query = query.filter(Video.type == video_type)
        return query.all()


class PPTService(MediaService[PPT]):
    """Service for presentation metadata."""

    model = PPT
    entity_name = "PPT"
    category = UploadCategory.PRESENTATION

    def list_all(self, module_id: str | None = None) -> list[PPT]:
        query = self._query()
        if module_id:
            query = query.filter(PPT.module_id == module_id)
        return query.all()
