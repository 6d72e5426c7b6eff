"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CORPUSDB__SECTION__KEY)
3. Project YAML (./corpusdb.yaml)
4. Global YAML (~/.config/corpusdb/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CORPUSDB__<SECTION>__<KEY>=<VALUE>

Examples:
    CORPUSDB__LOGGING__LEVEL=DEBUG
    CORPUSDB__DATABASE__URL=mysql+pymysql://root@localhost/clojuredocs
    CORPUSDB__IMPORT_RUN__RECLAIM_STALE=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CORPUSDB__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every reconciled row.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DatabaseConfig(BaseModel):
    """Relational store connection configuration.

    Env vars:
        CORPUSDB__DATABASE__URL: SQLAlchemy database URL
        CORPUSDB__DATABASE__BUSY_TIMEOUT_MS: SQLite busy timeout
        CORPUSDB__DATABASE__ECHO: Log every SQL statement
    """

    url: str = Field(
        default="sqlite:///corpus.db",
        description="SQLAlchemy URL of the relational store.",
    )
    busy_timeout_ms: int = Field(
        default=30000,
        description="SQLite busy timeout (ms). How long to wait for locks. "
        "Ignored for other backends.",
    )
    echo: bool = Field(
        default=False,
        description="Echo SQL statements through the sqlalchemy.engine logger.",
    )

    @field_validator("busy_timeout_ms")
    @classmethod
    def validate_busy_timeout(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"busy_timeout_ms must be >= 0, got {v}")
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class ImportConfig(BaseModel):
    """Import run behaviour.

    Env vars:
        CORPUSDB__IMPORT_RUN__RECLAIM_STALE: Delete functions a run did not refresh
        CORPUSDB__IMPORT_RUN__TRACK_TASKS: Write library_import_tasks/logs rows
    """

    reclaim_stale: bool = Field(
        default=False,
        description="After a run, delete the library's functions (and their references) "
        "that the run did not refresh. RISK: a partial corpus deletes real rows.",
    )
    track_tasks: bool = Field(
        default=True,
        description="Record the run in library_import_tasks and library_import_logs.",
    )


class CorpusDbConfig(BaseModel):
    """Root configuration for corpusdb.

    All settings can be configured via:
    1. Environment variables: CORPUSDB__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    import_run: ImportConfig = Field(default_factory=ImportConfig)
