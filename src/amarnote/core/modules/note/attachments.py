"""Validation and encoding helpers for note attachments."""

import base64
import re
from pathlib import PurePosixPath

from amarnote.core.modules.note.models import FileAttachment
from amarnote.errors import ValidationError
from amarnote.utils import generate_id

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
ALLOWED_DOCUMENT_TYPES = frozenset(
    {
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
ALLOWED_AUDIO_TYPES = frozenset({"audio/mpeg", "audio/wav", "audio/ogg", "audio/mp4"})
ALLOWED_TYPES = ALLOWED_IMAGE_TYPES | ALLOWED_DOCUMENT_TYPES | ALLOWED_AUDIO_TYPES


UPLOAD_NAME_MAX_LENGTH = 100
FALLBACK_UPLOAD_NAME = "unnamed_file"

_UNUSUAL_CHARS_RE = re.compile(r"[<>:\"|?*\x00-\x1f]+")
_UNDERSCORES_RE = re.compile(r"_{2,}")
_SPACES_RE = re.compile(r"\s+")
_MEANINGFUL_RE = re.compile(r"[^\s._-]")


def clean_upload_name(filename: str) -> str:
    """Base name of an uploaded file, safe to store and show.

    Directories and leading dots are dropped, unusual characters become
    underscores and long names are cut down keeping their extension.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name.lstrip(".")
    name = _SPACES_RE.sub(" ", _UNDERSCORES_RE.sub("_", _UNUSUAL_CHARS_RE.sub("_", name)))

    if len(name) > UPLOAD_NAME_MAX_LENGTH:
        stem, dot, extension = name.rpartition(".")
        if dot and stem and len(extension) < UPLOAD_NAME_MAX_LENGTH // 2:
            name = f"{stem[: UPLOAD_NAME_MAX_LENGTH - len(extension) - 1]}.{extension}"
        else:
            name = name[:UPLOAD_NAME_MAX_LENGTH]

    return name if _MEANINGFUL_RE.search(name) else FALLBACK_UPLOAD_NAME


def create_attachment(name: str, mime_type: str, data: bytes, max_size: int) -> FileAttachment:
    """Validate an upload and wrap it as a base64 attachment."""
    if len(data) > max_size:
        raise ValidationError(f"File is too large: {len(data)} bytes (limit {max_size})")
    if mime_type not in ALLOWED_TYPES:
        raise ValidationError(f"Unsupported file type: {mime_type}")

    return FileAttachment(
        id=generate_id("attachment_"),
        name=clean_upload_name(name),
        size=len(data),
        type=mime_type,
        data=base64.b64encode(data).decode("ascii"),
    )


def attachment_bytes(attachment: FileAttachment) -> bytes:
    return base64.b64decode(attachment.data)