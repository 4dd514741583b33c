"""
Database URL resolution for tooling that runs outside the API process.
"""

from __future__ import annotations

import os
from pathlib import Path

from app.config import load_settings


def normalize_postgres_url(url: str) -> str:
    """
    Normalize postgres URLs to SQLAlchemy's recommended psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def resolve_database_url(env_path: str | Path | None = None) -> str:
    """
    Resolve the database URL for migrations.

    Priority:
    1) the DB_* keys of ``env_path`` (same file the server reads via --env)
    2) DATABASE_URL
    """

    if env_path:
        return load_settings(env_path).database.to_url()

    direct_url = os.getenv("DATABASE_URL")
    if direct_url:
        return normalize_postgres_url(direct_url)

    raise RuntimeError(
        "No database URL configured. Pass -x env=PATH or set DATABASE_URL."
    )
