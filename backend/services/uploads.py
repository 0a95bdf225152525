"""Character image storage (local disk or GCS)."""

from __future__ import annotations

import logging
import os
import secrets
import time

from app.config import get_upload_backend, get_upload_dir
from services import gcs

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}
MAX_IMAGE_BYTES = 5 * 1024 * 1024
CHARACTERS_FOLDER = "characters"
PUBLIC_PREFIX = "/uploads"


class InvalidUploadError(ValueError):
    """Upload rejected before storage (bad type, empty, too large)."""


def _unique_filename(original_name: str | None, content_type: str) -> str:
    ext = os.path.splitext(original_name or "")[1].lower() or ALLOWED_IMAGE_TYPES[content_type]
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def validate_image(content_type: str | None, data: bytes) -> str:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidUploadError("Invalid file type. Only JPEG, PNG and GIF are allowed.")
    if not data:
        raise InvalidUploadError("Uploaded image is empty")
    if len(data) > MAX_IMAGE_BYTES:
        raise InvalidUploadError("Image exceeds the 5MB limit")
    return content_type


def store_character_image(
    data: bytes,
    *,
    content_type: str | None,
    filename: str | None = None,
) -> str:
    """Validate and persist an image; returns the URL clients should use."""
    content_type = validate_image(content_type, data)
    name = _unique_filename(filename, content_type)
    backend = get_upload_backend()

    if backend == "gcs":
        blob_name = f"{CHARACTERS_FOLDER}/{name}"
        gcs.upload_blob(blob_name, data, content_type=content_type)
        logger.info("[uploads] Stored %s in GCS (%d bytes)", blob_name, len(data))
        return gcs.generate_signed_url(blob_name)

    folder = os.path.join(get_upload_dir(), CHARACTERS_FOLDER)
    os.makedirs(folder, exist_ok=True)
    with open(os.path.join(folder, name), "wb") as f:
        f.write(data)
    logger.info("[uploads] Stored %s on disk (%d bytes)", name, len(data))
    return f"{PUBLIC_PREFIX}/{CHARACTERS_FOLDER}/{name}"
