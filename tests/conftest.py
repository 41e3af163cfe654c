"""
Pytest configuration and shared fixtures.

Environment defaults are set before any application module is imported,
since config.settings is loaded once at import time.
"""

import os

# Use .setdefault() to respect values already set by docker-compose or other sources
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "test_book_network")
os.environ.setdefault("DATABASE_USER", "postgres")
os.environ.setdefault("DATABASE_PASSWORD", "postgres")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("CELERY_BROKER_URL", "redis://localhost:6379/1")
os.environ.setdefault("LOG_LEVEL", "ERROR")
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-secret-that-is-at-least-32-bytes")

# Minimum bcrypt cost keeps hashing fast in tests
os.environ.setdefault("BCRYPT_ROUNDS", "4")

# Metrics need Redis; tests opt in explicitly
os.environ.setdefault("ENABLE_METRICS", "false")

import pytest  # noqa: E402

from src.infrastructure.security.bcrypt_password_hasher import BcryptPasswordHasher  # noqa: E402
from src.infrastructure.security.jwt_token_codec import JwtTokenCodec  # noqa: E402

TEST_SIGNING_KEY = "test-signing-secret-that-is-at-least-32-bytes"


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_codec() -> JwtTokenCodec:
    return JwtTokenCodec(signing_key=TEST_SIGNING_KEY, expires_in_seconds=3600)
