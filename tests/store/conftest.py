"""Shared fixtures for store tests."""

from __future__ import annotations

import pytest

from corpusdb.store import (
    Database,
    EntityStores,
    FunctionRecord,
    LibraryRecord,
    NamespaceRecord,
)
from tests.conftest import FakeClock


@pytest.fixture
def demo_library() -> LibraryRecord:
    return LibraryRecord(
        name="demo",
        version="1.0",
        description="Demo library.",
        site_url="https://demo.example.org",
        source_base_url="https://github.com/demo/demo/blob/master/src/",
        copyright="&copy; Demo authors",
        license="EPL-1.0",
    )


@pytest.fixture
def demo_namespace() -> NamespaceRecord:
    return NamespaceRecord(name="demo.core", doc="  hello\n    world")


@pytest.fixture
def seeded(
    temp_db: Database,
    clock: FakeClock,
    demo_library: LibraryRecord,
    demo_namespace: NamespaceRecord,
) -> dict[str, int]:
    """demo 1.0 with demo.core/{foo,bar} and demo.util/baz; returns function ids by name."""
    stores = EntityStores.create(temp_db, clock)
    stores.libraries.store(demo_library)
    stores.namespaces.store(demo_library, demo_namespace)
    stores.namespaces.store(demo_library, NamespaceRecord(name="demo.util"))
    ids: dict[str, int] = {}
    for namespace, name in (("demo.core", "foo"), ("demo.core", "bar"), ("demo.util", "baz")):
        result = stores.functions.store(
            demo_library, FunctionRecord(namespace=namespace, name=name)
        )
        assert result.row_id is not None
        ids[name] = result.row_id
    return ids
