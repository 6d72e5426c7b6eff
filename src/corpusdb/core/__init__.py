"""Core module exports."""

from corpusdb.core.errors import (
    ConfigError,
    CorpusDbError,
    CorpusError,
    ErrorCode,
    InternalError,
    StoreError,
)
from corpusdb.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CorpusDbError",
    "CorpusError",
    "ErrorCode",
    "InternalError",
    "StoreError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
