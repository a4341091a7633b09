from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from eventdesk.core.config import settings


def _engine_options(url: str, timeout_seconds: float) -> dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": timeout_seconds}}

    timeout_ms = int(timeout_seconds * 1000)
    return {
        "pool_pre_ping": True,
        "pool_timeout": timeout_seconds,
        "connect_args": {
            "connect_timeout": max(1, int(timeout_seconds)),
            "options": f"-c statement_timeout={timeout_ms} -c lock_timeout={timeout_ms}",
        },
    }


def _install_sqlite_locking(engine: Engine) -> None:
    # SQLite has no row locks; every transaction takes the write lock up front
    # so a read-check-append sequence cannot interleave with another writer.
    @event.listens_for(engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str, timeout_seconds: float) -> Engine:
    engine = create_engine(url, future=True, **_engine_options(url, timeout_seconds))
    if engine.dialect.name == "sqlite":
        _install_sqlite_locking(engine)
    return engine


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=bind, autoflush=False, future=True)


engine = build_engine(settings.database_url, settings.db_timeout_seconds)
SessionLocal = build_session_factory(engine)


def get_db(request: Request) -> Iterator[Session]:
    # Each app carries the session factory for its own database URL
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    from eventdesk.models import Base

    Base.metadata.create_all(bind or engine)
