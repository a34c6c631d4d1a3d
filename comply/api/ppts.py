"""Presentation API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import FileResponse

from comply.api.dependencies import get_current_user, get_ppt_service, require_admin
from comply.api.errors import http_error
from comply.api.uploads import incoming_upload, parse_form
from comply.exceptions import ComplyError, NotFoundError
from comply.models.user import User
from comply.schemas.media import PPTCreate, PPTResponse, PPTUpdate
from comply.services.media_service import PPTService

router = APIRouter(prefix="/api/v1/ppts", tags=["ppts"])


@router.post("/upload", response_model=PPTResponse, status_code=status.HTTP_201_CREATED)
def upload_ppt(
    file: Annotated[UploadFile, File(description="PPT, PPTX or PDF file (max 50MB)")],
    title: Annotated[str, Form()],
    slides: Annotated[int, Form()],
    module_id: Annotated[str, Form()],
    current_user: Annotated[User, Depends(require_admin)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
    module_name: Annotated[str | None, Form()] = None,
):
    """Upload a presentation with its metadata (admin only)."""
    data = parse_form(
        PPTCreate,
        title=title,
        slides=slides,
        module_id=module_id,
        module_name=module_name,
    )
    try:
        return ppt_service.create(data, incoming_upload(file))
    except ComplyError as e:
        raise http_error(e) from None


@router.get("", response_model=list[PPTResponse])
def list_ppts(
    current_user: Annotated[User, Depends(get_current_user)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
    module_id: Annotated[str | None, Query()] = None,
):
    """List presentations, optionally for one module."""
    return ppt_service.list_all(module_id=module_id)


@router.get("/{ppt_id}", response_model=PPTResponse)
def get_ppt(
    ppt_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
):
    """Get a specific presentation."""
    try:
        return ppt_service.get(ppt_id)
    except NotFoundError as e:
        raise http_error(e) from None


@router.get("/{ppt_id}/download")
def download_ppt(
    ppt_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
):
    """Download a presentation under its original filename."""
    try:
        ppt = ppt_service.get(ppt_id)
        path = ppt_service.storage.resolve(ppt.file_url)
    except NotFoundError as e:
        raise http_error(e) from None
    return FileResponse(path, media_type=ppt.mime_type, filename=ppt.file_name or path.name)


@router.patch("/{ppt_id}", response_model=PPTResponse)
def update_ppt(
    ppt_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
    file: Annotated[UploadFile | None, File()] = None,
    title: Annotated[str | None, Form()] = None,
    slides: Annotated[int | None, Form()] = None,
    module_id: Annotated[str | None, Form()] = None,
    module_name: Annotated[str | None, Form()] = None,
):
    """Update presentation metadata and optionally replace its file (admin only)."""
    data = parse_form(
        PPTUpdate,
        title=title,
        slides=slides,
        module_id=module_id,
        module_name=module_name,
    )
    upload = incoming_upload(file) if file is not None else None
    try:
        return ppt_service.update(ppt_id, data, upload)
    except ComplyError as e:
        raise http_error(e) from None


@router.delete("/{ppt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ppt(
    ppt_id: str,
    current_user: Annotated[User, Depends(require_admin)],
    ppt_service: Annotated[PPTService, Depends(get_ppt_service)],
):
    """Delete a presentation record (admin only). The stored file is kept."""
    try:
        ppt_service.delete(ppt_id)
    except NotFoundError as e:
        raise http_error(e) from None
