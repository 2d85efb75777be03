from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _connect_args(database_url: str, connect_timeout: int) -> dict[str, object]:
    if database_url.startswith("postgresql"):
        return {"connect_timeout": connect_timeout}
    if database_url.startswith("sqlite"):
        # Request handlers run on the threadpool, not the thread that opened the file.
        return {"check_same_thread": False}
    return {}


@lru_cache(maxsize=8)
def _engine_for(database_url: str, connect_timeout: int) -> Engine:
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=_connect_args(database_url, connect_timeout),
    )


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    connect_timeout = max(1, int(timeout_seconds))
    return _engine_for(_database_url(), connect_timeout)


def session_factory(engine: Engine) -> sessionmaker[Session]:
    # Orders are mapped to domain objects after commit; keep loaded attributes.
    return sessionmaker(bind=engine, expire_on_commit=False)


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.execute(text("SELECT 1"))
    except (RuntimeError, SQLAlchemyError) as exc:
        logger.warning("database_ping_failed", extra={"error": str(exc)})
        return False
    return True
