"""Tests for error types and codes."""

import pytest

from corpusdb.core.errors import (
    ConfigError,
    CorpusDbError,
    CorpusError,
    ErrorCode,
    InternalError,
    StoreError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.CORPUS_FILE_NOT_FOUND, 3000),
            (ErrorCode.CORPUS_INVALID, 3000),
            (ErrorCode.CHAIN_DUPLICATE_LABEL, 4000),
            (ErrorCode.LIBRARY_NOT_FOUND, 4000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestCorpusDbError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        # Given
        error = CorpusDbError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        error = CorpusDbError(code=ErrorCode.INTERNAL_ERROR, message="boom")

        assert str(error) == "[9001] INTERNAL_ERROR: boom"

    def test_given_error_when_raised_then_catchable_as_base(self) -> None:
        with pytest.raises(CorpusDbError):
            raise StoreError.duplicate_label("lib")


class TestFactories:
    """Factory classmethods build consistent codes and details."""

    def test_config_invalid_value(self) -> None:
        error = ConfigError.invalid_value("database.busy_timeout_ms", -1, "must be >= 0")

        assert error.code is ErrorCode.CONFIG_INVALID_VALUE
        assert error.details == {
            "field": "database.busy_timeout_ms",
            "value": "-1",
            "reason": "must be >= 0",
        }

    def test_corpus_invalid_mentions_location(self) -> None:
        error = CorpusError.invalid("corpus.yaml", "library.version", "Field required")

        assert error.code is ErrorCode.CORPUS_INVALID
        assert "library.version" in error.message

    def test_duplicate_label(self) -> None:
        error = StoreError.duplicate_label("ns")

        assert error.code is ErrorCode.CHAIN_DUPLICATE_LABEL
        assert error.details == {"label": "ns"}

    @pytest.mark.parametrize(
        ("version", "expected"),
        [("1.0", "Library not found: demo 1.0"), (None, "Library not found: demo")],
    )
    def test_library_not_found(self, version: str | None, expected: str) -> None:
        assert StoreError.library_not_found("demo", version).message == expected

    def test_internal_unexpected_keeps_details(self) -> None:
        error = InternalError.unexpected("bad state", step="reclaim")

        assert error.details == {"step": "reclaim"}
