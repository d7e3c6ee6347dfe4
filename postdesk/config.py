from __future__ import annotations

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


class Config:
    SECRET_KEY: str = os.getenv("SECRET_KEY", os.urandom(32).hex())

    # Database
    # Read from environment and then unset so it is not inherited by subprocesses
    SQLALCHEMY_DATABASE_URI: str = os.environ.pop("DATABASE_URL", "sqlite:///postdesk.db")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # Bearer tokens
    JWT_SECRET: str | None = os.getenv("JWT_SECRET")
    JWT_EXPIRE: str = os.getenv("JWT_EXPIRE", "7d")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Request bodies are small JSON documents
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(1024 * 1024)))

    # Listing
    POSTS_DEFAULT_PAGE_LIMIT = int(os.getenv("POSTS_DEFAULT_PAGE_LIMIT", "10"))
    POSTS_MAX_PAGE_LIMIT = int(os.getenv("POSTS_MAX_PAGE_LIMIT", "100"))

    # Caching. The listing cache is cleared on every write, so it must be shared
    # by all gunicorn workers; SimpleCache only suits a single process.
    CACHE_TYPE = os.getenv("CACHE_TYPE", "FileSystemCache")
    CACHE_DIR = os.getenv("CACHE_DIR", os.path.join(tempfile.gettempdir(), "postdesk-cache"))
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "60"))

    # Rate limiting
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "100 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Logging and request timing
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    SLOW_REQUEST_THRESHOLD_MS = int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "1000"))

    # Security headers. The API serves JSON only, nothing needs to load.
    SECURITY_CSP = "default-src 'none'; frame-ancestors 'none'"
    SECURITY_HSTS_SECONDS = 31536000
    CORS_ALLOW_ORIGIN = os.getenv("CORS_ALLOW_ORIGIN", "*")

    # Flask env
    ENV = os.getenv("FLASK_ENV", "production")
    DEBUG = ENV == "development"
