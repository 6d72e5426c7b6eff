"""Look up, then update or insert: the reconciliation behind every store.

reconcile() runs lookup -> on_found | on_missing inside one transaction.
Natural keys are unique in the schema, so an insert that collides with a row
written by a concurrent run raises IntegrityError; the insert is wrapped in a
SAVEPOINT, rolled back alone, and the conflict is resolved as an update.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

if TYPE_CHECKING:
    from corpusdb.store.database import Database

logger = structlog.get_logger()

Row = TypeVar("Row")
T = TypeVar("T")


class UpsertAction(str, Enum):
    """What a store call did."""

    INSERTED = "inserted"
    UPDATED = "updated"
    SKIPPED = "skipped"  # Owning parent missing, nothing written
    FAILED = "failed"  # Unexpected error, logged and swallowed by best-effort stores


@dataclass(frozen=True, slots=True)
class StoreResult:
    """Outcome of one store call."""

    action: UpsertAction
    row_id: int | None = None
    reason: str | None = None

    @property
    def written(self) -> bool:
        return self.action in (UpsertAction.INSERTED, UpsertAction.UPDATED)


def reconcile(
    db: Database,
    lookup: Callable[[Session], Row | None],
    on_found: Callable[[Session, Row], T],
    on_missing: Callable[[Session], T],
) -> T:
    """Run ``on_found(existing)`` if ``lookup`` finds a row, else ``on_missing``.

    All three callables receive the transaction's session. ``on_missing``
    runs in a SAVEPOINT; if it violates a unique constraint the lookup is
    repeated and ``on_found`` applied to the row that won the race.
    """
    with db.transaction() as session:
        existing = lookup(session)
        if existing is not None:
            return on_found(session, existing)

        try:
            with session.begin_nested():
                return on_missing(session)
        except IntegrityError as e:
            existing = lookup(session)
            if existing is None:
                raise
            logger.info("upsert_insert_conflict", error=str(e.orig))
            return on_found(session, existing)
