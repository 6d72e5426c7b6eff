"""Config module exports."""

from corpusdb.config.loader import load_config
from corpusdb.config.models import (
    CorpusDbConfig,
    DatabaseConfig,
    ImportConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "CorpusDbConfig",
    "DatabaseConfig",
    "ImportConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
