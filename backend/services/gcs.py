"""GCS storage and signed URLs for uploaded character images."""

import os
from datetime import datetime, timedelta, timezone

DEFAULT_BUCKET = "tabletop-session-media"
IMAGE_URL_EXPIRATION_SECONDS = 7 * 24 * 3600  # v4 signed URLs max out at 7 days


def get_bucket_name() -> str:
    """Bucket name from env or default."""
    return os.environ.get("GCS_BUCKET", "").strip() or DEFAULT_BUCKET


def upload_blob(
    blob_name: str,
    data: bytes,
    *,
    content_type: str,
    bucket_name: str | None = None,
) -> None:
    """
    Upload raw bytes to a GCS object.

    :param blob_name: Object path in bucket, e.g. "characters/1700000000-123.png"
    :param data: Raw bytes to upload
    :param content_type: MIME type stored on the object
    :param bucket_name: GCS bucket; default from GCS_BUCKET env
    """
    from google.cloud import storage

    bucket_name = bucket_name or get_bucket_name()
    client = storage.Client()
    bucket = client.bucket(bucket_name)
    blob = bucket.blob(blob_name)
    blob.upload_from_string(data, content_type=content_type)


def generate_signed_url(
    blob_name: str,
    *,
    bucket_name: str | None = None,
    expiration_seconds: int = IMAGE_URL_EXPIRATION_SECONDS,
    method: str = "GET",
) -> str:
    """
    Generate a v4 signed URL for a GCS object.

    Uses default credentials (GOOGLE_APPLICATION_CREDENTIALS or ADC).
    """
    from google.cloud import storage

    bucket_name = bucket_name or get_bucket_name()
    client = storage.Client()
    bucket = client.bucket(bucket_name)
    blob = bucket.blob(blob_name)
    expiration = datetime.now(timezone.utc) + timedelta(seconds=expiration_seconds)
    return blob.generate_signed_url(
        expiration=expiration,
        method=method,
        version="v4",
    )
