"""Directed, duplicate-free reference links between functions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from corpusdb.store.models import Function, FunctionReference, Namespace
from corpusdb.store.records import FunctionRef

if TYPE_CHECKING:
    from corpusdb.store.database import Database

logger = structlog.get_logger()


def resolve_function_id(session: Session, ref: FunctionRef) -> int | None:
    """Exact match on namespace name + function name (+ version when given).

    Without a version the most recently inserted match wins.
    """
    stmt = (
        select(Function.id)
        .join(Namespace, col(Function.namespace_id) == col(Namespace.id))
        .where(Namespace.name == ref.namespace, Function.name == ref.name)
    )
    if ref.version is not None:
        stmt = stmt.where(Function.version == ref.version)
    return session.exec(stmt.order_by(col(Function.id).desc()).limit(1)).first()


def resolve_target_id(session: Session, source: FunctionRef, target: FunctionRef) -> int | None:
    """Resolve an unversioned target in the source's version first.

    Falls back to any version, for targets that live in another library.
    """
    if target.version is None and source.version is not None:
        found = resolve_function_id(session, replace(target, version=source.version))
        if found is not None:
            return found
    return resolve_function_id(session, target)


class ReferenceLinker:
    """Insert missing ``from -> to`` rows for a function's outbound references.

    Each target is checked and inserted in its own transaction: a failure on
    one target never rolls back links already written for earlier targets.
    """

    def __init__(self, db: Database) -> None:
        self.db = db
        self.created = 0  # Rows written by this linker

    def link(self, source: FunctionRef, targets: Iterable[FunctionRef]) -> bool:
        """Link ``source`` to every resolvable target.

        Returns:
            True when the call completed (including when the source is
            unknown or every target was skipped), False after an unexpected
            error, which is logged.
        """
        try:
            with self.db.transaction() as session:
                from_id = resolve_function_id(session, source)
            if from_id is None:
                logger.debug("reference_source_not_found", source=str(source))
                return True

            for target in targets:
                with self.db.transaction() as session:
                    to_id = resolve_target_id(session, source, target)
                if to_id is None:
                    logger.debug(
                        "reference_target_skipped", source=str(source), target=str(target)
                    )
                    continue
                self._link_pair(from_id, to_id)
            return True
        except Exception as e:  # noqa: BLE001
            logger.error(
                "reference_link_failed",
                source=str(source),
                error=str(e),
                exc_info=True,
            )
            return False

    def _link_pair(self, from_id: int, to_id: int) -> bool:
        """Insert (from_id, to_id) unless present; True if a row was written."""
        try:
            with self.db.transaction() as session:
                existing = session.exec(
                    select(FunctionReference.id)
                    .where(
                        FunctionReference.from_function_id == from_id,
                        FunctionReference.to_function_id == to_id,
                    )
                    .limit(1)
                ).first()
                if existing is not None:
                    return False
                session.add(FunctionReference(from_function_id=from_id, to_function_id=to_id))
                session.flush()
            self.created += 1
            return True
        except IntegrityError:
            # Written by a concurrent run between the check and the insert
            if self._pair_exists(from_id, to_id):
                return False
            raise

    def _pair_exists(self, from_id: int, to_id: int) -> bool:
        with self.db.session() as session:
            row = session.exec(
                select(FunctionReference.id).where(
                    FunctionReference.from_function_id == from_id,
                    FunctionReference.to_function_id == to_id,
                )
            ).first()
        return row is not None

    def references_from(self, function_id: int) -> list[int]:
        with self.db.session() as session:
            rows = session.exec(
                select(FunctionReference.to_function_id)
                .where(FunctionReference.from_function_id == function_id)
                .order_by(col(FunctionReference.id))
            ).all()
        return list(rows)

    def references_to(self, function_id: int) -> list[int]:
        with self.db.session() as session:
            rows = session.exec(
                select(FunctionReference.from_function_id)
                .where(FunctionReference.to_function_id == function_id)
                .order_by(col(FunctionReference.id))
            ).all()
        return list(rows)
