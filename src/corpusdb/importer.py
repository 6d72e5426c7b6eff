"""Import one library's corpus into the relational store.

Order of operations (each step commits before the next begins):
1. Reconcile the library row
2. Open a RUNNING import task
3. Reconcile every namespace (needs the library)
4. Reconcile every function (needs its namespace); failures are per-function
5. Link references once all functions exist, since targets may live in any
   namespace of the corpus
6. Optionally reclaim functions this run did not refresh
7. Close the task as COMPLETE, or FAILED if an unexpected error escaped
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

import structlog

from corpusdb.config.models import ImportConfig
from corpusdb.core.errors import StoreError
from corpusdb.core.logging import clear_run_id, set_run_id
from corpusdb.store.entities import Clock, EntityStores
from corpusdb.store.models import LogLevel, TaskStatus
from corpusdb.store.reclaim import StaleReclaimer
from corpusdb.store.references import ReferenceLinker
from corpusdb.store.tasks import ImportTracker
from corpusdb.store.upsert import StoreResult, UpsertAction

if TYPE_CHECKING:
    from corpusdb.corpus import Corpus
    from corpusdb.store.database import Database
    from corpusdb.store.records import FunctionRef

logger = structlog.get_logger()


@dataclass
class ImportResult:
    """Counters for one import run."""

    library_id: int | None = None
    task_id: int | None = None
    library_action: UpsertAction | None = None
    namespaces_inserted: int = 0
    namespaces_updated: int = 0
    namespaces_skipped: int = 0
    functions_inserted: int = 0
    functions_updated: int = 0
    functions_skipped: int = 0
    functions_failed: int = 0
    references_created: int = 0
    reference_failures: int = 0
    reclaimed: list[FunctionRef] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def functions_stored(self) -> int:
        return self.functions_inserted + self.functions_updated

    @property
    def ok(self) -> bool:
        return self.functions_failed == 0 and self.reference_failures == 0


class Importer:
    """Runs the store pipeline for a Corpus."""

    def __init__(
        self,
        db: Database,
        config: ImportConfig | None = None,
        clock: Clock = time.time,
    ) -> None:
        self.db = db
        self.config = config or ImportConfig()
        self._clock = clock
        self.stores = EntityStores.create(db, clock)
        self.linker = ReferenceLinker(db)
        self.reclaimer = StaleReclaimer(db)
        self.tracker = ImportTracker(db, clock)

    def run(self, corpus: Corpus) -> ImportResult:
        run_id = set_run_id()
        start = time.perf_counter()
        started_at = self._clock()
        result = ImportResult()
        library = corpus.library
        log = logger.bind(library=library.name, version=library.version)
        log.info("import_started", run_id=run_id)

        try:
            lib_result = self.stores.libraries.store(library)
            if lib_result.row_id is None:
                raise StoreError.library_not_found(library.name, library.version)
            result.library_id = lib_result.row_id
            result.library_action = lib_result.action

            if self.config.track_tasks:
                result.task_id = self.tracker.start(lib_result.row_id)

            try:
                self._import_items(corpus, result, started_at)
            except Exception as e:
                self._task_log(result, LogLevel.ERROR, f"Import aborted: {e}")
                self._finish(result, TaskStatus.FAILED)
                log.error("import_failed", error=str(e), exc_info=True)
                raise

            self._finish(result, TaskStatus.COMPLETE)
        finally:
            result.duration_ms = (time.perf_counter() - start) * 1000
            clear_run_id()

        log.info(
            "import_finished",
            namespaces=result.namespaces_inserted + result.namespaces_updated,
            functions=result.functions_stored,
            functions_failed=result.functions_failed,
            references=result.references_created,
            reclaimed=len(result.reclaimed),
            duration_ms=round(result.duration_ms, 1),
        )
        return result

    def _import_items(self, corpus: Corpus, result: ImportResult, started_at: float) -> None:
        library = corpus.library

        for namespace in corpus.namespaces:
            ns_result = self.stores.namespaces.store(library, namespace)
            self._count_namespace(result, ns_result)
            if ns_result.action is UpsertAction.SKIPPED:
                self._task_log(
                    result,
                    LogLevel.WARNING,
                    f"Skipped namespace {namespace.name}: {ns_result.reason}",
                )

        for function in corpus.functions:
            fn_result = self.stores.functions.store(library, function)
            self._count_function(result, fn_result)
            if fn_result.action is UpsertAction.SKIPPED:
                self._task_log(
                    result, LogLevel.WARNING, f"Skipped {function.ref}: {fn_result.reason}"
                )
            elif fn_result.action is UpsertAction.FAILED:
                self._task_log(
                    result, LogLevel.ERROR, f"Failed {function.ref}: {fn_result.reason}"
                )

        created_before = self.linker.created
        for function in corpus.functions:
            if not function.references:
                continue
            source = function.ref
            if source.version is None:
                source = replace(source, version=library.version)
            if not self.linker.link(source, function.references):
                result.reference_failures += 1
                self._task_log(result, LogLevel.ERROR, f"Failed linking references of {source}")
        result.references_created = self.linker.created - created_before

        if self.config.reclaim_stale and result.library_id is not None:
            result.reclaimed = self.reclaimer.reclaim(result.library_id, started_at)
            if result.reclaimed:
                names = ", ".join(str(ref) for ref in result.reclaimed)
                self._task_log(
                    result, LogLevel.INFO, f"Reclaimed {len(result.reclaimed)} stale: {names}"
                )

    @staticmethod
    def _count_namespace(result: ImportResult, store_result: StoreResult) -> None:
        if store_result.action is UpsertAction.INSERTED:
            result.namespaces_inserted += 1
        elif store_result.action is UpsertAction.UPDATED:
            result.namespaces_updated += 1
        else:
            result.namespaces_skipped += 1

    @staticmethod
    def _count_function(result: ImportResult, store_result: StoreResult) -> None:
        if store_result.action is UpsertAction.INSERTED:
            result.functions_inserted += 1
        elif store_result.action is UpsertAction.UPDATED:
            result.functions_updated += 1
        elif store_result.action is UpsertAction.SKIPPED:
            result.functions_skipped += 1
        else:
            result.functions_failed += 1

    def _task_log(self, result: ImportResult, level: LogLevel, message: str) -> None:
        if result.task_id is not None:
            self.tracker.log(result.task_id, level, message)

    def _finish(self, result: ImportResult, status: TaskStatus) -> None:
        if result.task_id is not None:
            self.tracker.finish(result.task_id, status)
