"""Import run bookkeeping: library_import_tasks and library_import_logs.

These rows are write-only from the importer's point of view; they are the
user-visible record of what a run did and which items it skipped.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from corpusdb.store.models import LibraryImportLog, LibraryImportTask, LogLevel, TaskStatus

if TYPE_CHECKING:
    from corpusdb.store.database import Database
    from corpusdb.store.entities import Clock


class ImportTracker:
    """Open, annotate and close import tasks."""

    def __init__(self, db: Database, clock: Clock = time.time) -> None:
        self.db = db
        self._clock = clock

    def start(self, library_id: int) -> int:
        """Write a RUNNING task for ``library_id`` and return its id."""
        now = self._clock()
        with self.db.transaction() as session:
            task = LibraryImportTask(
                library_id=library_id,
                status=TaskStatus.RUNNING.value,
                created_at=now,
                updated_at=now,
            )
            session.add(task)
            session.flush()
            assert task.id is not None
            return task.id

    def finish(self, task_id: int, status: TaskStatus) -> None:
        with self.db.transaction() as session:
            task = session.get(LibraryImportTask, task_id)
            if task is None:
                return
            task.status = status.value
            task.updated_at = self._clock()
            session.add(task)

    def log(self, task_id: int, level: LogLevel, message: str) -> None:
        with self.db.transaction() as session:
            session.add(
                LibraryImportLog(
                    library_import_task_id=task_id,
                    level=level.value,
                    message=message,
                    created_at=self._clock(),
                )
            )
