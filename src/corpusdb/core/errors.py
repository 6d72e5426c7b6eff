"""corpusdb error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Corpus documents
- 4xxx: Store
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Corpus (3xxx)
    CORPUS_FILE_NOT_FOUND = 3001
    CORPUS_PARSE_ERROR = 3002
    CORPUS_INVALID = 3003

    # Store (4xxx)
    CHAIN_DUPLICATE_LABEL = 4001
    LIBRARY_NOT_FOUND = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CorpusDbError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CorpusDbError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class CorpusError(CorpusDbError):
    """Errors reading a scraped corpus document."""

    @classmethod
    def file_not_found(cls, path: str) -> "CorpusError":
        return cls(
            code=ErrorCode.CORPUS_FILE_NOT_FOUND,
            message=f"Corpus file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CorpusError":
        return cls(
            code=ErrorCode.CORPUS_PARSE_ERROR,
            message=f"Failed to parse corpus at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid(cls, path: str, location: str, reason: str) -> "CorpusError":
        return cls(
            code=ErrorCode.CORPUS_INVALID,
            message=f"Invalid corpus at {path} ({location}): {reason}",
            details={"path": path, "location": location, "reason": reason},
        )


class StoreError(CorpusDbError):
    """Errors raised by the persistence layer itself."""

    @classmethod
    def duplicate_label(cls, label: str) -> "StoreError":
        return cls(
            code=ErrorCode.CHAIN_DUPLICATE_LABEL,
            message=f"Chained insert label used more than once: {label}",
            details={"label": label},
        )

    @classmethod
    def library_not_found(cls, name: str, version: str | None = None) -> "StoreError":
        label = f"{name} {version}" if version else name
        return cls(
            code=ErrorCode.LIBRARY_NOT_FOUND,
            message=f"Library not found: {label}",
            details={"name": name, "version": version},
        )


class InternalError(CorpusDbError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
