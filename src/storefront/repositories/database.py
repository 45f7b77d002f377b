from __future__ import annotations

import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.errors import DatabaseConnectionError

log = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn, _record) -> None:
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON;")
    cur.close()


def make_engine(url: URL | str) -> Engine:
    engine = create_engine(url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def connect(url: URL | str) -> Engine:
    """Create the engine and prove the database is reachable."""
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        engine.dispose()
        raise DatabaseConnectionError(f"Unable to connect to database: {exc}") from exc
    log.info("database_connected dialect=%s", engine.dialect.name)
    return engine
