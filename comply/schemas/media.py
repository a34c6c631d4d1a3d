"""Video and presentation schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from comply.models.enums import VideoType


class VideoCreate(BaseModel):
    """Metadata submitted with a video upload."""

    title: str = Field(..., min_length=1, max_length=500)
    duration: str = Field(..., min_length=1, max_length=50)
    type: VideoType
    module_id: str | None = Field(None, max_length=255)
    module_name: str | None = Field(None, max_length=500)


class VideoUpdate(BaseModel):
    """Partial video metadata update."""

    title: str | None = Field(None, min_length=1, max_length=500)
    duration: str | None = Field(None, min_length=1, max_length=50)
    type: VideoType | None = None
    module_id: str | None = Field(None, max_length=255)
    module_name: str | None = Field(None, max_length=500)


class PPTCreate(BaseModel):
    """Metadata submitted with a presentation upload."""

    title: str = Field(..., min_length=1, max_length=500)
    slides: int = Field(..., ge=0)
    module_id: str = Field(..., min_length=1, max_length=255)
    module_name: str | None = Field(None, max_length=500)


class PPTUpdate(BaseModel):
    """Partial presentation metadata update."""

    title: str | None = Field(None, min_length=1, max_length=500)
    slides: int | None = Field(None, ge=0)
    module_id: str | None = Field(None, min_length=1, max_length=255)
    module_name: str | None = Field(None, max_length=500)


class StoredFileResponse(BaseModel):
    """File fields shared by every uploaded artifact."""

    model_config = ConfigDict(from_attributes=True)

    file_url: str
    file_name: str | None
    file_size: int | None
    mime_type: str | None


class VideoResponse(StoredFileResponse):
    """Video response."""

    id: str
    title: str
    duration: str
    type: VideoType
    module_id: str | None
    module_name: str | None
    created_at: datetime
    updated_at: datetime


class PPTResponse(StoredFileResponse):
    """Presentation response."""

    id: str
    title: str
    slides: int
    module_id: str
    module_name: str | None
    created_at: datetime
    updated_at: datetime
