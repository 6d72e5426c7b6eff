"""Database engine and the transaction scope every store writes through.

This module provides:
- Database: engine owner built from an explicit DatabaseConfig
- Database.transaction(): all-or-nothing unit of work; nested scopes on the
  same Database join the outermost transaction instead of opening a new one
- Database.run(): call a unit of work inside transaction()

SQLite connections run with the driver's implicit transaction handling turned
off and an explicit BEGIN per transaction, so SAVEPOINTs (used by the upsert
reconciler) nest inside the outer transaction instead of committing early.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from corpusdb.config.models import DatabaseConfig

logger = structlog.get_logger()

T = TypeVar("T")


class Database:
    """
    Relational store handle with a re-entrant transaction scope.

    Usage::

        db = Database(config.database)
        db.create_all()

        with db.transaction() as session:
            session.add(Library(name="demo", version="1.0"))
            # A store called here joins this transaction
            namespace_store.store(library, namespace)
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.config = config
        self.engine = self._create_engine()
        self._active: Session | None = None

    def _create_engine(self) -> Engine:
        if not self.config.is_sqlite:
            return create_engine(self.config.url, echo=self.config.echo, pool_pre_ping=True)

        engine = create_engine(
            self.config.url,
            echo=self.config.echo,
            connect_args={"check_same_thread": False},
        )
        busy_timeout_ms = self.config.busy_timeout_ms

        def _on_connect(dbapi_conn: Any, _connection_record: Any) -> None:
            _configure_sqlite(dbapi_conn, busy_timeout_ms)

        event.listen(engine, "connect", _on_connect)
        event.listen(engine, "begin", _begin_sqlite)
        return engine

    def create_all(self) -> None:
        """Create all tables from SQLModel metadata."""
        SQLModel.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        """Drop all tables. Use with caution."""
        SQLModel.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Plain ORM session for reads; nothing is committed."""
        with Session(self.engine) as session:
            yield session

    @property
    def in_transaction(self) -> bool:
        return self._active is not None

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        All-or-nothing unit of work.

        Commits on normal exit, rolls back and re-raises on any exception.
        Inside an open scope this yields the outer session: the caller's
        writes commit or roll back with the outermost scope.
        """
        if self._active is not None:
            yield self._active
            return

        with Session(self.engine, expire_on_commit=False) as session:
            self._active = session
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                logger.debug("transaction_rolled_back")
                raise
            finally:
                self._active = None

    def run(self, unit_of_work: Callable[[Session], T]) -> T:
        """Run ``unit_of_work(session)`` inside transaction()."""
        with self.transaction() as session:
            return unit_of_work(session)


def _configure_sqlite(dbapi_conn: Any, busy_timeout_ms: int) -> None:
    """Configure SQLite for a single writer with foreign keys enforced."""
    # Hand transaction control to the "begin" listener
    dbapi_conn.isolation_level = None
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite(conn: Any) -> None:
    conn.exec_driver_sql("BEGIN")
