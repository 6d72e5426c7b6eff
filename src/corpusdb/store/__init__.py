"""Persistence layer for the documentation corpus."""

from corpusdb.store.chain import InsertStep, run_chained
from corpusdb.store.database import Database
from corpusdb.store.entities import (
    EntityStores,
    FunctionStore,
    LibraryStore,
    NamespaceStore,
    find_function,
    find_library,
    find_namespace,
)
from corpusdb.store.indexes import create_additional_indexes
from corpusdb.store.reclaim import StaleReclaimer
from corpusdb.store.records import FunctionRecord, FunctionRef, LibraryRecord, NamespaceRecord
from corpusdb.store.references import ReferenceLinker, resolve_function_id, resolve_target_id
from corpusdb.store.tasks import ImportTracker
from corpusdb.store.upsert import StoreResult, UpsertAction, reconcile

__all__ = [
    "Database",
    "InsertStep",
    "run_chained",
    "reconcile",
    "StoreResult",
    "UpsertAction",
    "EntityStores",
    "LibraryStore",
    "NamespaceStore",
    "FunctionStore",
    "find_library",
    "find_namespace",
    "find_function",
    "ReferenceLinker",
    "resolve_function_id",
    "resolve_target_id",
    "StaleReclaimer",
    "ImportTracker",
    "create_additional_indexes",
    "LibraryRecord",
    "NamespaceRecord",
    "FunctionRecord",
    "FunctionRef",
]
