"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import structlog

from corpusdb.config.models import LoggingConfig, LogOutputConfig
from corpusdb.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        # When
        result = set_run_id("run-123")

        # Then
        assert result == "run-123"
        assert get_run_id() == "run-123"

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        rid = set_run_id()

        assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def teardown_method(self) -> None:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def test_given_json_output_when_log_then_valid_json_with_run_id(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "corpusdb.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        set_run_id("abc123")

        # When
        get_logger("test").info("library_stored", library="demo")

        # Then
        data = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert data["event"] == "library_stored"
        assert data["library"] == "demo"
        assert data["run_id"] == "abc123"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_info_level_when_debug_logged_then_dropped(self, tmp_path: Path) -> None:
        # Given
        log_file = tmp_path / "corpusdb.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )

        # When
        get_logger().debug("hidden")
        get_logger().warning("shown")

        # Then
        content = log_file.read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_given_multi_output_config_when_configure_then_levels_per_output(
        self, tmp_path: Path
    ) -> None:
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="console", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_simple_params_when_configure_then_single_stderr_handler(self) -> None:
        configure_logging(json_format=True, level="WARNING")

        [handler] = logging.getLogger().handlers
        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.WARNING

    def test_given_configure_when_done_then_sql_echo_quiet(self) -> None:
        configure_logging(level="DEBUG")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
