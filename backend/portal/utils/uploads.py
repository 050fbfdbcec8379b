"""Storage helpers for image uploads (profile pictures, institution logos)."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Optional

from ..config import settings


_LOGGER = logging.getLogger("portal.uploads")
_IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")
INVALID_TYPE_MESSAGE = "Invalid file type. Only JPEG, PNG, and GIF are allowed."


class InvalidUploadError(ValueError):
    """Raised when an uploaded file is refused before it is written."""


def get_upload_root() -> Path:
    """Return the upload directory, creating it when needed."""
    root = Path(settings.UPLOAD_DIR)
    root.mkdir(parents=True, exist_ok=True)
    return root


def is_allowed_image(content_type: Optional[str]) -> bool:
    return bool(content_type) and _IMAGE_TYPES.search(content_type.lower()) is not None


def validate_upload_filename(filename: str) -> None:
    if not filename or len(filename) > 200:
        raise InvalidUploadError("invalid filename")
    if "/" in filename or "\\" in filename:
        raise InvalidUploadError("invalid filename path")


def timestamped_name(filename: str, now_ms: Optional[int] = None) -> str:
    """Prefix `filename` with the current epoch time in milliseconds."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}_{filename}"


def store_image(payload: bytes, filename: str, content_type: Optional[str]) -> str:
    """Validate and write an image upload, returning its stored path.

    The returned path is `<UPLOAD_DIR>/<epoch ms>_<filename>` and is what
    gets saved on the owning row.
    """
    if not is_allowed_image(content_type):
        raise InvalidUploadError(INVALID_TYPE_MESSAGE)
    validate_upload_filename(filename)
    if len(payload) > settings.MAX_UPLOAD_BYTES:
        raise InvalidUploadError("file too large")
    target = get_upload_root() / timestamped_name(filename)
    target.write_bytes(payload)
    _LOGGER.info("stored upload %s (%d bytes)", target, len(payload))
    return f"{settings.UPLOAD_DIR.rstrip('/')}/{target.name}"
