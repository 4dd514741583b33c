"""
db/session.py

SQLAlchemy engine and session factory for the execution-log store.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.config import ConnectionParams, DatabasePoolSettings
from app.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


def create_db_engine(
    params: ConnectionParams,
    pool: DatabasePoolSettings | None = None,
) -> Engine:
    """
    Create a PostgreSQL engine from explicit connection parameters.
    """

    pool = pool or DatabasePoolSettings()
    return create_engine(
        params.to_url(),
        echo=pool.echo,
        pool_pre_ping=True,
        pool_recycle=pool.pool_recycle,
        pool_size=pool.pool_size,
        max_overflow=pool.max_overflow,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def check_connection(engine: Engine) -> None:
    """Run SELECT 1. Raises DatabaseConnectionError if the DB is unreachable."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise DatabaseConnectionError(
            f"Database unavailable at {engine.url.render_as_string(hide_password=True)}: {exc}"
        ) from exc
    logger.info("Database connectivity confirmed")
