"""Isolate config tests from the developer's environment."""

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No global YAML and no CORPUSDB__ env vars leak into tests."""
    monkeypatch.setattr(
        "corpusdb.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml"
    )
    for key in list(os.environ):
        if key.upper().startswith("CORPUSDB__"):
            monkeypatch.delenv(key)
