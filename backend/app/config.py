"""Environment-driven settings. `.env` is loaded by server.py before these are read."""

import os

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_IMAGE_MODEL = "gemini-1.5-flash"
UPLOAD_BACKENDS = ("local", "gcs")


def get_host() -> str:
    return os.environ.get("HOST", "").strip() or DEFAULT_HOST


def get_port() -> int:
    raw = os.environ.get("PORT", "").strip()
    return int(raw) if raw else DEFAULT_PORT


def get_log_level() -> str:
    return os.environ.get("LOG_LEVEL", "").strip().upper() or "INFO"


def get_cors_origins() -> list[str]:
    """Comma-separated CORS_ORIGINS, or every origin when unset."""
    raw = os.environ.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def get_upload_backend() -> str:
    backend = os.environ.get("UPLOAD_BACKEND", "").strip().lower() or "local"
    if backend not in UPLOAD_BACKENDS:
        raise ValueError(f"UPLOAD_BACKEND must be one of {list(UPLOAD_BACKENDS)}, got {backend!r}")
    return backend


def get_upload_dir() -> str:
    return os.environ.get("UPLOAD_DIR", "").strip() or DEFAULT_UPLOAD_DIR


def get_google_api_key() -> str:
    return os.environ.get("GOOGLE_API_KEY", "").strip()


def get_image_model() -> str:
    return os.environ.get("IMAGE_MODEL", "").strip() or DEFAULT_IMAGE_MODEL
