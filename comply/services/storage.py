"""Upload admission: validate, name and durably store incoming files.

Each upload category carries its own rules:

* ``video``: extensions mp4/avi/mov/wmv/flv/mkv/webm or any ``video/*`` MIME type
* ``presentation``: extensions ppt/pptx/pdf or the PowerPoint/PDF MIME types

A file is accepted when either its extension or its declared MIME type
matches. Accepted files get a random name that keeps the original extension,
are streamed to a temporary file in the category directory and then renamed
into place, so a failed or oversized upload never leaves a visible file.
"""

import logging
import os
import re
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from comply.config import Settings, get_settings
from comply.exceptions import (
    NotFoundError,
    SizeExceededError,
    StorageFailureError,
    ValidationRejectedError,
)
from comply.models.enums import UploadCategory

logger = logging.getLogger(__name__)

MIB = 1024 * 1024
CHUNK_SIZE = MIB
LOCATOR_PREFIX = "/uploads"
DEFAULT_MIME_TYPE = "application/octet-stream"

VIDEO_EXTENSIONS = frozenset({"mp4", "avi", "mov", "wmv", "flv", "mkv", "webm"})
VIDEO_MIME_PATTERN = re.compile(r"^video/")

PRESENTATION_EXTENSIONS = frozenset({"ppt", "pptx", "pdf"})
PRESENTATION_MIME_PATTERN = re.compile(
    r"^application/("
    r"vnd\.ms-powerpoint"
    r"|vnd\.openxmlformats-officedocument\.presentationml\.presentation"
    r"|pdf"
    r")$"
)


@dataclass(frozen=True)
class UploadPolicy:
    """Validation rules and storage location for one upload category."""

    category: UploadCategory
    extensions: frozenset[str]
    mime_pattern: re.Pattern
    max_bytes: int
    subdir: str
    label: str

    def extension_allowed(self, filename: str) -> bool:
        return _extension(filename) in self.extensions

    def mime_allowed(self, mime_type: str) -> bool:
        return self.mime_pattern.match(mime_type or "") is not None


@dataclass(frozen=True)
class IncomingUpload:
    """An untrusted file as received from the transport."""

    stream: BinaryIO
    filename: str
    mime_type: str
    size_bytes: int | None = None


@dataclass(frozen=True)
class StoredFile:
    """An admitted file and the metadata the caller should record."""

    locator: str
    original_filename: str
    size_bytes: int
    mime_type: str


def _extension(filename: str) -> str:
    return PurePosixPath(filename or "").suffix.lower().lstrip(".")


def default_policies(settings: Settings) -> dict[UploadCategory, UploadPolicy]:
    """Build the per-category rules from settings."""
    return {
        UploadCategory.VIDEO: UploadPolicy(
            category=UploadCategory.VIDEO,
            extensions=VIDEO_EXTENSIONS,
            mime_pattern=VIDEO_MIME_PATTERN,
            max_bytes=settings.max_video_size_mb * MIB,
            subdir="videos",
            label="Only video files are allowed!",
        ),
        UploadCategory.PRESENTATION: UploadPolicy(
            category=UploadCategory.PRESENTATION,
            extensions=PRESENTATION_EXTENSIONS,
            mime_pattern=PRESENTATION_MIME_PATTERN,
            max_bytes=settings.max_ppt_size_mb * MIB,
            subdir="ppts",
            label="Only PPT/PPTX/PDF files are allowed!",
        ),
    }


class UploadStorage:
    """Category-aware file store rooted at a local directory."""

    def __init__(self, root: Path, policies: dict[UploadCategory, UploadPolicy]):
        self.root = Path(root)
        self.policies = policies

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadStorage":
        return cls(settings.upload_dir, default_policies(settings))

    def policy(self, category: UploadCategory) -> UploadPolicy:
        return self.policies[UploadCategory(category)]

    def ensure_directories(self) -> None:
        """Create every category directory."""
        for policy in self.policies.values():
            (self.root / policy.subdir).mkdir(parents=True, exist_ok=True)

    def validate(
        self,
        filename: str,
        mime_type: str,
        category: UploadCategory,
        size_bytes: int | None = None,
    ) -> UploadPolicy:
        """Check declared size and type against the category's rules.

        Size is checked first so an oversized file is reported as such whatever
        its type.
        """
        policy = self.policy(category)
        if size_bytes is not None and size_bytes > policy.max_bytes:
            logger.warning(
                f"Upload rejected: {policy.category.value} of {size_bytes} bytes "
                f"exceeds {policy.max_bytes}"
            )
            raise SizeExceededError(policy.max_bytes)
        if not policy.extension_allowed(filename) and not policy.mime_allowed(mime_type):
            logger.warning(
                f"Upload rejected: {policy.category.value} with extension "
                f"'{_extension(filename)}' and MIME type '{mime_type}'"
            )
            raise ValidationRejectedError(policy.label)
        return policy

    def admit(self, upload: IncomingUpload, category: UploadCategory) -> StoredFile:
        """Validate and store an upload, returning its locator and metadata."""
        mime_type = upload.mime_type or DEFAULT_MIME_TYPE
        policy = self.validate(upload.filename, mime_type, category, upload.size_bytes)

        suffix = PurePosixPath(upload.filename).suffix
        stored_name = f"{uuid.uuid4()}{suffix}"
        directory = self.root / policy.subdir
        target = directory / stored_name
        partial = directory / f".{stored_name}.part"

        try:
            directory.mkdir(parents=True, exist_ok=True)
            size = self._write(upload.stream, partial, policy.max_bytes)
            os.replace(partial, target)
        except OSError as e:
            partial.unlink(missing_ok=True)
            logger.exception(f"Failed to store {policy.category.value} upload")
            raise StorageFailureError("Failed to store file") from e
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

        logger.info(f"Admitted {policy.category.value} upload as {stored_name} ({size} bytes)")
        return StoredFile(
            locator=f"{LOCATOR_PREFIX}/{policy.subdir}/{stored_name}",
            original_filename=upload.filename,
            size_bytes=size,
            mime_type=mime_type,
        )

    @staticmethod
    def _write(stream: BinaryIO, path: Path, max_bytes: int) -> int:
        written = 0
        with open(path, "xb") as out:
            while chunk := stream.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise SizeExceededError(max_bytes)
                out.write(chunk)
        return written

    def resolve(self, locator: str) -> Path:
        """Map a locator back to a stored file path."""
        parts = PurePosixPath(locator or "").parts
        subdirs = {policy.subdir for policy in self.policies.values()}
        if (
            len(parts) != 4
            or parts[0] != "/"
            or f"/{parts[1]}" != LOCATOR_PREFIX
            or parts[2] not in subdirs
            or parts[3].startswith(".")
        ):
            raise NotFoundError("File", locator)
        path = self.root / parts[2] / parts[3]
        if not path.is_file():
            raise NotFoundError("File", locator)
        return path

    def discard(self, locator: str) -> None:
        """Remove a stored file, ignoring files that are already gone."""
        try:
            path = self.resolve(locator)
        except NotFoundError:
            return
        try:
            path.unlink()
        except OSError:
            logger.exception(f"Failed to discard {locator}")


@lru_cache
def get_upload_storage() -> UploadStorage:
    """Get the process-wide upload storage."""
    return UploadStorage.from_settings(get_settings())
