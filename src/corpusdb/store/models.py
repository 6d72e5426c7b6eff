"""SQLModel definitions for the documentation corpus.

Single source of truth for all table schemas.

Tables:
- libraries / namespaces / functions: the scraped corpus, each unique on its
  natural key so an insert conflict signals a concurrent writer
- function_references: directed "from uses to" edges between functions
- library_import_tasks / library_import_logs: write-only run bookkeeping

Timestamps are epoch seconds (time.time()).
"""

from enum import Enum

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


class TaskStatus(str, Enum):
    """Import task lifecycle."""

    RUNNING = "RUNNING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


class LogLevel(str, Enum):
    """Level of a library_import_logs row."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Library(SQLModel, table=True):
    """A scraped library at one version."""

    __tablename__ = "libraries"
    __table_args__ = (UniqueConstraint("name", "version", name="uq_libraries_name_version"),)

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    version: str
    description: str | None = Field(default=None, sa_column=Column(Text))
    site_url: str | None = None
    source_base_url: str | None = None
    copyright: str | None = None
    license: str | None = None
    url_friendly_name: str | None = None
    created_at: float | None = None
    updated_at: float | None = None


class Namespace(SQLModel, table=True):
    """Namespace owned by a library."""

    __tablename__ = "namespaces"
    __table_args__ = (UniqueConstraint("name", "version", name="uq_namespaces_name_version"),)

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    version: str
    doc: str | None = Field(default=None, sa_column=Column(Text))
    source_url: str | None = None
    library_id: int = Field(foreign_key="libraries.id", index=True)
    created_at: float | None = None
    updated_at: float | None = None


class Function(SQLModel, table=True):
    """Function (var) documented inside a namespace."""

    __tablename__ = "functions"
    __table_args__ = (
        UniqueConstraint("namespace_id", "name", "version", name="uq_functions_ns_name_version"),
    )

    id: int | None = Field(default=None, primary_key=True)
    namespace_id: int = Field(foreign_key="namespaces.id", index=True)
    name: str = Field(index=True)
    version: str
    file: str | None = None
    line: int | None = None
    arglists_comp: str | None = Field(default=None, sa_column=Column(Text))  # "|"-joined
    added: str | None = None
    doc: str | None = Field(default=None, sa_column=Column(Text))
    shortdoc: str | None = None  # Computed once, never recomputed on update
    source: str | None = Field(default=None, sa_column=Column(Text))
    url_friendly_name: str | None = None
    created_at: float | None = None
    updated_at: float | None = None


class FunctionReference(SQLModel, table=True):
    """Directed edge: from_function uses to_function."""

    __tablename__ = "function_references"
    __table_args__ = (
        UniqueConstraint("from_function_id", "to_function_id", name="uq_function_references_pair"),
    )

    id: int | None = Field(default=None, primary_key=True)
    from_function_id: int = Field(foreign_key="functions.id", index=True)
    to_function_id: int = Field(foreign_key="functions.id")


class LibraryImportTask(SQLModel, table=True):
    """One import run of a library."""

    __tablename__ = "library_import_tasks"

    id: int | None = Field(default=None, primary_key=True)
    library_id: int = Field(foreign_key="libraries.id", index=True)
    status: str = Field(default=TaskStatus.RUNNING.value)
    created_at: float | None = None
    updated_at: float | None = None


class LibraryImportLog(SQLModel, table=True):
    """Leveled log line attached to an import task."""

    __tablename__ = "library_import_logs"

    id: int | None = Field(default=None, primary_key=True)
    library_import_task_id: int = Field(foreign_key="library_import_tasks.id", index=True)
    level: str
    message: str = Field(sa_column=Column(Text))
    created_at: float | None = None
