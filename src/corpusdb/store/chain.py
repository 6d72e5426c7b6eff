"""Chained inserts: dependent rows written as one atomic unit.

Each step is a label and a builder. The builder receives the ids produced by
the steps before it (keyed by label) and returns either a new row to insert
or the id of a row it wrote itself through a store. The whole chain runs in
one transaction, so a child never survives a parent that was rolled back::

    ids = run_chained(db, [
        InsertStep("library", lambda ids: Library(name="demo", version="1.0")),
        InsertStep("namespace", lambda ids: Namespace(
            name="demo.core", version="1.0", library_id=ids["library"])),
    ])
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog
from sqlmodel import SQLModel

from corpusdb.core.errors import StoreError

if TYPE_CHECKING:
    from corpusdb.store.database import Database

logger = structlog.get_logger()

StepBuilder = Callable[[Mapping[str, int]], "SQLModel | int"]


@dataclass(frozen=True, slots=True)
class InsertStep:
    """One link of a chain: ``build(ids_so_far)`` -> row to insert, or an id."""

    label: str
    build: StepBuilder


def run_chained(db: Database, steps: Iterable[InsertStep]) -> dict[str, int]:
    """Execute ``steps`` in order inside one transaction.

    Returns:
        label -> generated id for every step.

    Raises:
        StoreError: a label appears twice (checked before any write).
        Exception: whatever a builder or insert raised; nothing persists.
    """
    steps = list(steps)
    seen: set[str] = set()
    for step in steps:
        if step.label in seen:
            raise StoreError.duplicate_label(step.label)
        seen.add(step.label)

    ids: dict[str, int] = {}
    with db.transaction() as session:
        for step in steps:
            built = step.build(MappingProxyType(ids))
            if isinstance(built, SQLModel):
                session.add(built)
                session.flush()
                row_id = built.id  # type: ignore[attr-defined]
            else:
                row_id = built
            if row_id is None:
                raise TypeError(f"Step {step.label!r} produced no id")
            ids[step.label] = int(row_id)
            logger.debug("chain_step_inserted", label=step.label, id=ids[step.label])
    return dict(ids)
