"""
Module: editor.upload

Purpose:
    Upload collaborator interface and the checks applied before a file is
    handed to it. The storage backend itself lives outside this package;
    editors only see the Uploader interface.

Key Classes:
    - UploadFile: File picked by the author (name, MIME type, bytes)
    - UploadResult: Durable url and public id returned by the collaborator
    - Uploader: Abstract upload collaborator
    - UploadError / UploadRejectedError: Failure with a human-readable message

Key Functions:
    - validate_upload(file, kind): Enforce MIME type and size limits
    - to_data_url(file): Local base64 preview used as a non-durable fallback

Dependencies:
    - PIL: Verifies image bytes decode before upload

Used By:
    - editor.field_editor.SpatialFieldEditor
"""

from __future__ import annotations

import base64
import io
import logging
import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .config import DEFAULT_CONFIG, EditorConfig

logger = logging.getLogger(__name__)


class MediaKind(str, Enum):
    """Kind of media accepted by an upload control."""
    IMAGE = "image"
    AUDIO = "audio"

    @property
    def mime_prefix(self) -> str:
        return f"{self.value}/"

    def max_bytes(self, config: EditorConfig = DEFAULT_CONFIG) -> int:
        return config.max_image_bytes if self is MediaKind.IMAGE else config.max_audio_bytes


class UploadError(Exception):
    """Upload failed; str(error) is shown to the author."""


class UploadRejectedError(UploadError):
    """File rejected before reaching the collaborator."""


@dataclass(frozen=True)
class UploadFile:
    """A file selected for upload."""

    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: Path, mime_type: Optional[str] = None) -> UploadFile:
        """Read a local file, guessing its MIME type from the extension."""
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            mime_type=mime_type or guessed or "application/octet-stream",
            data=path.read_bytes(),
        )


@dataclass(frozen=True)
class UploadResult:
    """Durable location of an uploaded file."""

    url: str
    public_id: str = ""


class Uploader(ABC):
    """
    Abstract upload collaborator.

    Implementations push the file to durable storage and return its URL.
    """

    @abstractmethod
    def upload(self, file: UploadFile, kind: MediaKind) -> UploadResult:
        """
        Upload a file.

        Args:
            file: Validated file to upload
            kind: Media kind (selects the storage folder)

        Returns:
            UploadResult with the durable URL

        Raises:
            UploadError: With a human-readable message on failure
        """


def _format_mb(num_bytes: int) -> str:
    return f"{num_bytes // (1024 * 1024)}MB"


def validate_upload(
    file: UploadFile,
    kind: MediaKind,
    config: EditorConfig = DEFAULT_CONFIG,
) -> None:
    """
    Check a file against the limits for its media kind.

    Images must be image/* and decodable, at most 10MB by default; audio
    must be audio/*, at most 25MB. Files under min_upload_bytes are
    rejected as empty or corrupted.

    Raises:
        UploadRejectedError: Describing the first failed check
    """
    if not file.mime_type.startswith(kind.mime_prefix):
        raise UploadRejectedError(f"Please select a valid {kind.value} file")
    limit = kind.max_bytes(config)
    if file.size > limit:
        raise UploadRejectedError(
            f"{kind.value.capitalize()} size must be less than {_format_mb(limit)}"
        )
    if file.size < config.min_upload_bytes:
        raise UploadRejectedError(
            f"{kind.value.capitalize()} appears to be empty or corrupted"
        )
    if kind is MediaKind.IMAGE:
        try:
            with Image.open(io.BytesIO(file.data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError) as e:
            raise UploadRejectedError("Image appears to be empty or corrupted") from e


def to_data_url(file: UploadFile) -> str:
    """Encode a file as a base64 data URL for local preview."""
    encoded = base64.b64encode(file.data).decode("ascii")
    return f"data:{file.mime_type};base64,{encoded}"


def is_durable_url(url: str) -> bool:
    """True for URLs a persisted Question may reference (not data: previews)."""
    return bool(url) and not url.startswith("data:")
