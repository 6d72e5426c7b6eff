"""Additional index creation for query performance.

These indexes complement the unique constraints and single-column indexes
declared on the SQLModel tables. They serve the reference linker (reverse
lookups) and the stale reclaimer (updated_at scans).

Call create_additional_indexes() after Database.create_all().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import text

if TYPE_CHECKING:
    from sqlalchemy import Engine


ADDITIONAL_INDEXES = {
    "idx_function_references_to": (
        "CREATE INDEX IF NOT EXISTS idx_function_references_to "
        "ON function_references(to_function_id)"
    ),
    "idx_functions_namespace_updated": (
        "CREATE INDEX IF NOT EXISTS idx_functions_namespace_updated "
        "ON functions(namespace_id, updated_at)"
    ),
    "idx_library_import_logs_task_level": (
        "CREATE INDEX IF NOT EXISTS idx_library_import_logs_task_level "
        "ON library_import_logs(library_import_task_id, level)"
    ),
}


def create_additional_indexes(engine: Engine) -> None:
    """Create additional composite indexes."""
    with engine.connect() as conn:
        for sql in ADDITIONAL_INDEXES.values():
            conn.execute(text(sql))
        conn.commit()


def drop_additional_indexes(engine: Engine) -> None:
    """Drop additional indexes (for testing/reset)."""
    with engine.connect() as conn:
        for name in ADDITIONAL_INDEXES:
            conn.execute(text(f"DROP INDEX IF EXISTS {name}"))
        conn.commit()
