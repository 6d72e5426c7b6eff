"""Fixtures for CLI tests."""

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """The CLI points handlers at the runner's streams; drop them afterwards."""
    yield
    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Runner isolated from user config, with quiet logging."""
    monkeypatch.setattr(
        "corpusdb.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"
    )
    for key in list(os.environ):
        if key.upper().startswith("CORPUSDB__"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return CliRunner(env={"CORPUSDB__LOGGING__LEVEL": "ERROR"})


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'cli.db'}"


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "demo.yaml"
    path.write_text(
        "library:\n"
        "  name: demo\n"
        "  version: '1.0'\n"
        "namespaces:\n"
        "  - name: demo.core\n"
        "    functions:\n"
        "      - name: foo\n"
        "        references: [bar]\n"
        "      - name: bar\n"
    )
    return path
