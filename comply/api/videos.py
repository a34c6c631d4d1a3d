"""Video API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from comply.api.dependencies import get_current_user, get_video_service, require_admin
from comply.api.errors import http_error
from comply.api.uploads import incoming_upload, parse_form
from comply.exceptions import ComplyError, NotFoundError
from comply.models.enums import VideoType
from comply.models.user import User
from comply.schemas.media import VideoCreate, VideoResponse, VideoUpdate
from comply.services.media_service import VideoService

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


@router.post("/upload", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
def upload_video(
    file: Annotated[UploadFile, File(description="Video file (max 500MB)")],
    title: Annotated[str, Form()],
    duration: Annotated[str, Form()],
    type: Annotated[VideoType, Form()],
    current_user: Annotated[User, Depends(require_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
    module_id: Annotated[str | None, Form()] = None,
    module_name: Annotated[str | None, Form()] = None,
):
    """Upload a video file with its metadata (admin only)."""
    data = parse_form(
        VideoCreate,
        title=title,
        duration=duration,
        type=type,
        module_id=module_id,
        module_name=module_name,
    )
    try:
        return video_service.create(data, incoming_upload(file))
    except ComplyError as e:
        raise http_error(e) from None


@router.get("", response_model=list[VideoResponse])
def list_videos(
    current_user: Annotated[User, Depends(get_current_user)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
    type: Annotated[VideoType | None, Query()] = None,
    module_id: Annotated[str | None, Query()] = None,
):
    """List videos, optionally filtered by module or type."""
    return video_service.list_all(video_type=type, module_id=module_id)


@router.get("/{video_id}", response_model=VideoResponse)
def get_video(
    video_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """Get a specific video."""
    try:
        return video_service.get(video_id)
    except NotFoundError as e:
        raise http_error(e) from None


@router.get("/{video_id}/stream")
def stream_video(
    video_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """Stream a video file. Range requests are served by the response class."""
    try:
        video = video_service.get(video_id)
        path = video_service.storage.resolve(video.file_url)
    except NotFoundError as e:
        raise http_error(e) from None
    return FileResponse(path, media_type=video.mime_type)


@router.patch("/{video_id}", response_model=VideoResponse)
def update_video(
    video_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
    file: Annotated[UploadFile | None, File()] = None,
    title: Annotated[str | None, Form()] = None,
    duration: Annotated[str | None, Form()] = None,
    type: Annotated[VideoType | None, Form()] = None,
    module_id: Annotated[str | None, Form()] = None,
    module_name: Annotated[str | None, Form()] = None,
):
    """Update video metadata and optionally replace its file (admin only)."""
    data = parse_form(
        VideoUpdate,
        title=title,
        duration=duration,
        type=type,
        module_id=module_id,
        module_name=module_name,
    )
    upload = incoming_upload(file) if file is not None else None
    try:
        return video_service.update(video_id, data, upload)
    except ComplyError as e:
        raise http_error(e) from None


@router.delete("/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_video(
    video_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    video_service: Annotated[VideoService, Depends(get_video_service)],
):
    """Delete a video record (admin only). The stored file is kept."""
    try:
        video_service.delete(video_id)
    except NotFoundError as e:
        raise http_error(e) from None
