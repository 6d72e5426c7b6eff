"""Library, namespace and function stores.

Each store is one reconcile() instance keyed on the entity's natural key:

    Library    (name, version)
    Namespace  (name, version)               parent Library must exist
    Function   (namespace_id, name, version) parent Namespace must exist

A missing parent is not an error: nothing is written and the result is
SKIPPED with a reason. FunctionStore is best-effort: any other failure is
logged with the function's identity and reported as FAILED so the rest of
an import carries on.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import func
from sqlmodel import Session, col, select

from corpusdb.core.formatting import clean_doc, join_arglists, short_doc, url_friendly
from corpusdb.store.models import Function, Library, Namespace
from corpusdb.store.records import (
    FUNCTION_COLUMNS,
    LIBRARY_COLUMNS,
    NAMESPACE_COLUMNS,
    FunctionRecord,
    LibraryRecord,
    NamespaceRecord,
    to_params,
)
from corpusdb.store.upsert import StoreResult, UpsertAction, reconcile

if TYPE_CHECKING:
    from corpusdb.store.database import Database

logger = structlog.get_logger()

Clock = Callable[[], float]


def find_library(session: Session, name: str, version: str) -> Library | None:
    stmt = select(Library).where(Library.name == name, Library.version == version).limit(1)
    return session.exec(stmt).first()


def find_namespace(session: Session, name: str, version: str) -> Namespace | None:
    stmt = select(Namespace).where(Namespace.name == name, Namespace.version == version).limit(1)
    return session.exec(stmt).first()


def find_function(session: Session, namespace_id: int, name: str, version: str) -> Function | None:
    stmt = (
        select(Function)
        .where(
            Function.namespace_id == namespace_id,
            Function.name == name,
            Function.version == version,
        )
        .limit(1)
    )
    return session.exec(stmt).first()


def _apply(row: Any, params: dict[str, Any]) -> None:
    for column, value in params.items():
        setattr(row, column, value)


class _Store:
    def __init__(self, db: Database, clock: Clock = time.time) -> None:
        self.db = db
        self._clock = clock


class LibraryStore(_Store):
    """Upsert libraries by (name, version)."""

    def store(self, record: LibraryRecord) -> StoreResult:
        now = self._clock()
        params = to_params(record, LIBRARY_COLUMNS)
        params["url_friendly_name"] = url_friendly(record.name)

        def lookup(session: Session) -> Library | None:
            return find_library(session, record.name, record.version)

        def update(session: Session, existing: Library) -> StoreResult:
            _apply(existing, params)
            existing.updated_at = now
            session.add(existing)
            session.flush()
            return StoreResult(UpsertAction.UPDATED, existing.id)

        def insert(session: Session) -> StoreResult:
            row = Library(
                name=record.name,
                version=record.version,
                created_at=now,
                updated_at=now,
                **params,
            )
            session.add(row)
            session.flush()
            return StoreResult(UpsertAction.INSERTED, row.id)

        result = reconcile(self.db, lookup, update, insert)
        logger.debug(
            "library_stored",
            library=record.name,
            version=record.version,
            action=result.action.value,
            id=result.row_id,
        )
        return result

    def stats(self, name: str, version: str | None = None) -> dict[str, Any] | None:
        """Library row plus namespace/function counts; latest version if none given."""
        with self.db.session() as session:
            stmt = select(Library).where(Library.name == name)
            if version is not None:
                stmt = stmt.where(Library.version == version)
            library = session.exec(stmt.order_by(col(Library.id).desc()).limit(1)).first()
            if library is None:
                return None

            namespace_count = session.exec(
                select(func.count())
                .select_from(Namespace)
                .where(Namespace.library_id == library.id)
            ).one()
            function_count = session.exec(
                select(func.count())
                .select_from(Function)
                .join(Namespace, col(Function.namespace_id) == col(Namespace.id))
                .where(Namespace.library_id == library.id)
            ).one()

        return {
            **library.model_dump(),
            "namespace_count": int(namespace_count),
            "function_count": int(function_count),
        }


class NamespaceStore(_Store):
    """Upsert namespaces by (name, version) under an existing library."""

    def store(self, library: LibraryRecord, record: NamespaceRecord) -> StoreResult:
        now = self._clock()
        version = record.version or library.version
        params = to_params(record, NAMESPACE_COLUMNS)
        params["doc"] = clean_doc(record.doc)

        with self.db.transaction() as session:
            owner = find_library(session, library.name, library.version)
            if owner is None:
                logger.warning(
                    "namespace_skipped_library_not_found",
                    namespace=record.name,
                    library=library.name,
                    version=library.version,
                )
                return StoreResult(
                    UpsertAction.SKIPPED,
                    reason=f"library not found: {library.name} {library.version}",
                )
            params["library_id"] = owner.id

            def lookup(session: Session) -> Namespace | None:
                return find_namespace(session, record.name, version)

            def update(session: Session, existing: Namespace) -> StoreResult:
                _apply(existing, params)
                existing.updated_at = now
                session.add(existing)
                session.flush()
                return StoreResult(UpsertAction.UPDATED, existing.id)

            def insert(session: Session) -> StoreResult:
                row = Namespace(
                    name=record.name,
                    version=version,
                    created_at=now,
                    updated_at=now,
                    **params,
                )
                session.add(row)
                session.flush()
                return StoreResult(UpsertAction.INSERTED, row.id)

            result = reconcile(self.db, lookup, update, insert)

        logger.debug(
            "namespace_stored",
            namespace=record.name,
            version=version,
            action=result.action.value,
            id=result.row_id,
        )
        return result


class FunctionStore(_Store):
    """Upsert functions by (namespace_id, name, version); best-effort per function."""

    def store(self, library: LibraryRecord, record: FunctionRecord) -> StoreResult:
        try:
            return self._store(library, record)
        except Exception as e:  # noqa: BLE001
            logger.error(
                "function_store_failed",
                namespace=record.namespace,
                function=record.name,
                version=record.version or library.version,
                error=str(e),
                exc_info=True,
            )
            return StoreResult(UpsertAction.FAILED, reason=f"{record.name} -- {e}")

    def _store(self, library: LibraryRecord, record: FunctionRecord) -> StoreResult:
        now = self._clock()
        version = record.version or library.version
        params = to_params(record, FUNCTION_COLUMNS)
        params["arglists_comp"] = join_arglists(record.arglists)
        params["url_friendly_name"] = url_friendly(record.name)

        with self.db.transaction() as session:
            namespace = find_namespace(session, record.namespace, version)
            if namespace is None:
                logger.warning(
                    "function_skipped_namespace_not_found",
                    namespace=record.namespace,
                    function=record.name,
                    version=version,
                )
                return StoreResult(
                    UpsertAction.SKIPPED,
                    reason=f"namespace not found: {record.namespace} {version}",
                )
            namespace_id = namespace.id
            assert namespace_id is not None

            def lookup(session: Session) -> Function | None:
                return find_function(session, namespace_id, record.name, version)

            def update(session: Session, existing: Function) -> StoreResult:
                _apply(existing, params)
                if existing.shortdoc is None:
                    existing.shortdoc = short_doc(record.doc)
                existing.namespace_id = namespace_id
                existing.updated_at = now
                session.add(existing)
                session.flush()
                return StoreResult(UpsertAction.UPDATED, existing.id)

            def insert(session: Session) -> StoreResult:
                row = Function(
                    namespace_id=namespace_id,
                    name=record.name,
                    version=version,
                    shortdoc=short_doc(record.doc),
                    created_at=now,
                    updated_at=now,
                    **params,
                )
                session.add(row)
                session.flush()
                return StoreResult(UpsertAction.INSERTED, row.id)

            result = reconcile(self.db, lookup, update, insert)

        logger.debug(
            "function_stored",
            namespace=record.namespace,
            function=record.name,
            action=result.action.value,
            id=result.row_id,
        )
        return result


@dataclass
class EntityStores:
    """The three stores sharing one Database and clock."""

    libraries: LibraryStore
    namespaces: NamespaceStore
    functions: FunctionStore

    @classmethod
    def create(cls, db: Database, clock: Clock = time.time) -> EntityStores:
        return cls(
            libraries=LibraryStore(db, clock),
            namespaces=NamespaceStore(db, clock),
            functions=FunctionStore(db, clock),
        )
