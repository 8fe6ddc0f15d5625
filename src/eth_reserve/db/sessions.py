"""Database engine and session management."""
import threading
import weakref
from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager, nullcontext

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from eth_reserve.db import models  # noqa: F401  # pylint: disable=unused-import

SessionFactory = Callable[[], AbstractContextManager[Session]]

# one writer lock per SQLite engine, shared by every session factory built on it
_sqlite_locks: "weakref.WeakKeyDictionary[Engine, threading.RLock]" = weakref.WeakKeyDictionary()


def _create_sqlite_engine(database_url: str, echo: bool) -> Engine:
    kwargs: dict = {"echo": echo, "connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let SQLAlchemy emit it.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _record):  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")

    return engine


def create_db_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Create the synchronous SQLModel engine for the given URL."""
    if database_url.startswith("sqlite"):
        return _create_sqlite_engine(database_url, echo)
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def make_session_factory(engine: Engine) -> SessionFactory:
    """Return a callable yielding sessions that commit on success and roll back on error.

    Sessions are opened from worker threads. SQLite allows a single writer, so on
    SQLite one session is open at a time.
    """
    lock = None
    if engine.dialect.name == "sqlite":
        lock = _sqlite_locks.setdefault(engine, threading.RLock())

    @contextmanager
    def get_session() -> Generator[Session, None, None]:
        with lock if lock is not None else nullcontext():
            session = Session(engine, expire_on_commit=False)
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()

    return get_session


def init_db(engine: Engine) -> None:
    """Create all tables. Safe to call on startup (idempotent for existing tables)."""
    SQLModel.metadata.create_all(engine)
