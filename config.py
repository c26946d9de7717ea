"""Application configuration module."""

import os
from datetime import timedelta


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    AUTH_RATE_LIMIT = os.getenv("AUTH_RATE_LIMIT", "20 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Sessions
    SESSION_TTL = timedelta(days=int(os.getenv("SESSION_TTL_DAYS", "30")))
    SESSION_TOKEN_COOKIE_NAME = os.getenv("SESSION_TOKEN_COOKIE_NAME", "session_token")
    SESSION_TOKEN_COOKIE_SECURE = True
    SESSION_TOKEN_COOKIE_SAMESITE = "None"

    # Credentials
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "pbkdf2:sha256")
    MIN_PASSWORD_LENGTH = 6

    # Number of times a registration or provisioning transaction is retried
    # after losing a role slot to a concurrent writer.
    ROLE_CLAIM_ATTEMPTS = 3
