"""Study material intake: text files are read, documents and images are uploaded as-is."""
import base64
import logging
from pathlib import Path
from typing import Optional

from study_assistant.config import get_settings
from study_assistant.errors import InputError
from study_assistant.models import FileUpload

logger = logging.getLogger(__name__)

UPLOAD_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

TEXT_SUFFIXES = (".txt", ".md")


def is_oversized(size_bytes: int, max_mb: Optional[int] = None) -> bool:
    if max_mb is None:
        max_mb = get_settings().max_upload_mb
    return size_bytes > max_mb * 1024 * 1024


def load_upload(file_path: str) -> FileUpload:
    """Read a PDF or image and wrap its base64-encoded bytes for the generator."""
    path = Path(file_path).expanduser()
    suffix = path.suffix.lower()
    if suffix not in UPLOAD_TYPES:
        raise InputError(f"Unsupported file type {suffix or '(none)'}. Use PDF, PNG or JPG.")
    if not path.is_file():
        raise InputError(f"File not found: {file_path}")
    raw = path.read_bytes()
    if is_oversized(len(raw)):
        logger.warning("%s is %.1f MB, above the recommended upload size", path.name, len(raw) / 1024 / 1024)
    return FileUpload(
        name=path.name,
        mime_type=UPLOAD_TYPES[suffix],
        data=base64.b64encode(raw).decode("ascii"),
    )


def read_source(file_path: str) -> tuple[str, Optional[FileUpload]]:
    """Return (text, upload) for a file the user pointed at.

    Plain-text notes become the text input. Everything else goes through
    load_upload() untouched.
    """
    path = Path(file_path).expanduser()
    if path.suffix.lower() in TEXT_SUFFIXES:
        if not path.is_file():
            raise InputError(f"File not found: {file_path}")
        return path.read_text(encoding="utf-8", errors="ignore"), None
    return "", load_upload(file_path)
