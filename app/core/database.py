"""SQLAlchemy engine & session factory."""

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings

# Created on first use so importing models never needs a live database
_engine = None
_SessionLocal: Optional[sessionmaker] = None


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""


def enable_sqlite_savepoints(engine: Engine) -> Engine:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside the session transaction.

    The pysqlite driver otherwise delays BEGIN until the first DML statement,
    which turns a leading SAVEPOINT into an outer transaction.
    """
    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_pre_ping=True,
        )
        if _engine.dialect.name == "sqlite":
            enable_sqlite_savepoints(_engine)
    return _engine


def get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autocommit=False, autoflush=False)
    return _SessionLocal


def SessionLocal() -> Session:
    return get_session_factory()()
