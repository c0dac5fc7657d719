"""Database helpers for the flight reservation system."""
from __future__ import annotations

from typing import Dict, Optional, Tuple

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import load_settings
from .models import Base


def _install_sqlite_transaction_hooks(engine: Engine) -> None:
    """Make every SQLite transaction take the write lock up front.

    pysqlite defers ``BEGIN`` until the first write, which lets two readers see
    the same seat count before either inserts. ``BEGIN IMMEDIATE`` serializes
    writers from the first statement on.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(
    db_url: Optional[str] = None,
    *,
    echo: Optional[bool] = None,
    timeout: Optional[float] = None,
    connect_args: Dict[str, object] | None = None,
) -> Tuple[Engine, sessionmaker[Session]]:
    """Return an engine/session factory pair with serializable transactions.

    Unset arguments fall back to :func:`~flight_reservations.config.load_settings`.
    """

    settings = load_settings()
    db_url = db_url or settings.db_url
    echo = settings.sql_echo if echo is None else echo
    timeout = settings.db_timeout if timeout is None else timeout

    if db_url.startswith("sqlite"):
        final_connect_args: Dict[str, object] = {"check_same_thread": False, "timeout": timeout}
        if connect_args:
            final_connect_args.update(connect_args)
        engine_kwargs: Dict[str, object] = {}
    else:
        final_connect_args = connect_args or {}
        engine_kwargs = {"isolation_level": "SERIALIZABLE"}

    if db_url.endswith(":memory:"):
        engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(
        db_url,
        echo=echo,
        future=True,
        connect_args=final_connect_args,
        **engine_kwargs,
    )
    if engine.dialect.name == "sqlite":
        _install_sqlite_transaction_hooks(engine)
    session_factory = sessionmaker(bind=engine, expire_on_commit=False, future=True)
    return engine, session_factory


def init_db(db_url: Optional[str] = None, *, echo: Optional[bool] = None) -> sessionmaker[Session]:
    """Create all tables and return a session factory."""

    engine, session_factory = create_session_factory(db_url, echo=echo)
    Base.metadata.create_all(engine)
    return session_factory
