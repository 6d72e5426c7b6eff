"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local corpusdb package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of corpusdb modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("corpusdb"):
        del sys.modules[module_name]

from corpusdb.config.models import DatabaseConfig  # noqa: E402
from corpusdb.store import Database  # noqa: E402
from corpusdb.store.indexes import create_additional_indexes  # noqa: E402


class FakeClock:
    """Settable clock standing in for time.time."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def temp_db(tmp_path: Path) -> Generator[Database, None, None]:
    """Create a temporary SQLite database with schema."""
    db = Database(DatabaseConfig(url=f"sqlite:///{tmp_path / 'test.db'}"))
    db.create_all()
    create_additional_indexes(db.engine)
    yield db
    db.dispose()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
