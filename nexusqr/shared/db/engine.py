"""
nexusqr.shared.db.engine

Purpose:
    SQLAlchemy engine for the PostgreSQL database and the startup connectivity
    check run by the API lifespan.

Notes:
    - Pool of 10 connections per process.
    - check_connection() re-raises: a service that cannot reach its database
      must not start.

Created:
    2026-02-15
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 10


def create_db_engine(database_url: str, *, pool_size: int = DEFAULT_POOL_SIZE) -> Engine:
    """Create the SQLAlchemy engine for `database_url`."""
    if not database_url:
        raise ValueError("database_url must be set to create a database engine")
    return create_engine(database_url, pool_size=pool_size, pool_pre_ping=True, echo=False)


def check_connection(engine: Engine) -> None:
    safe_url = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database connection failed (%s)", safe_url)
        raise
    logger.info("Database connected (%s)", safe_url)
