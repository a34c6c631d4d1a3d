"""Helpers shared by the multipart upload routes."""

from typing import TypeVar

from fastapi import UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from comply.services.storage import DEFAULT_MIME_TYPE, IncomingUpload

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_form(model: type[ModelT], **fields) -> ModelT:
    """Validate form fields into a schema, dropping fields the client did not send.

    Failures surface as the usual 422 response.
    """
    try:
        return model(**{name: value for name, value in fields.items() if value is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from None


def incoming_upload(file: UploadFile) -> IncomingUpload:
    """Wrap a multipart file for the admission pipeline."""
    return IncomingUpload(
        stream=file.file,
        filename=file.filename or "",
        mime_type=file.content_type or DEFAULT_MIME_TYPE,
        size_bytes=file.size,
    )
