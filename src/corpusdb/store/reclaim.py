"""Delete functions an import run did not refresh.

A function is stale when it belongs to the library and its ``updated_at`` is
older than the cutoff or was never set. Stale functions are removed together
with every reference that points to or from them. Selection and both deletes
share one transaction; references go first because foreign keys are enforced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import delete, or_
from sqlmodel import col, select

from corpusdb.store.models import Function, FunctionReference, Namespace
from corpusdb.store.records import FunctionRef

if TYPE_CHECKING:
    from corpusdb.store.database import Database

logger = structlog.get_logger()


class StaleReclaimer:
    """Remove a library's functions last refreshed before a cutoff."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def reclaim(self, library_id: int, cutoff: float) -> list[FunctionRef]:
        """Delete stale functions of ``library_id``.

        Args:
            library_id: Owning library row id.
            cutoff: Epoch seconds; rows updated strictly before it are stale.

        Returns:
            Descriptors of the deleted functions, for reporting.
        """
        with self.db.transaction() as session:
            rows = session.exec(
                select(Function.id, Namespace.name, Function.name, Function.version)
                .join(Namespace, col(Function.namespace_id) == col(Namespace.id))
                .where(
                    Namespace.library_id == library_id,
                    or_(col(Function.updated_at) < cutoff, col(Function.updated_at).is_(None)),
                )
                .order_by(col(Function.id))
            ).all()
            if not rows:
                return []

            ids = [row[0] for row in rows]
            session.execute(
                delete(FunctionReference).where(
                    or_(
                        col(FunctionReference.from_function_id).in_(ids),
                        col(FunctionReference.to_function_id).in_(ids),
                    )
                )
            )
            session.execute(delete(Function).where(col(Function.id).in_(ids)))

        reclaimed = [
            FunctionRef(namespace=ns, name=name, version=version) for _, ns, name, version in rows
        ]
        logger.info("stale_functions_reclaimed", library_id=library_id, count=len(reclaimed))
        return reclaimed
