"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to real SMTP, Postgres or Vercel Blob
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_EMAIL", "")
os.environ.setdefault("BLOB_READ_WRITE_TOKEN", "")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
