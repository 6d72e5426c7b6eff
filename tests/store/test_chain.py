"""Tests for chained inserts."""

from __future__ import annotations

from collections.abc import Mapping

import pytest
from sqlmodel import select

from corpusdb.core.errors import ErrorCode, StoreError
from corpusdb.store import Database, InsertStep, LibraryRecord, LibraryStore, run_chained
from corpusdb.store.models import Library, Namespace


def _library(ids: Mapping[str, int]) -> Library:
    return Library(name="demo", version="1.0", created_at=1.0, updated_at=1.0)


def _namespace(ids: Mapping[str, int]) -> Namespace:
    return Namespace(name="demo.core", version="1.0", library_id=ids["lib"])


def _rows(db: Database) -> tuple[list[Library], list[Namespace]]:
    with db.session() as session:
        return list(session.exec(select(Library))), list(session.exec(select(Namespace)))


class TestRunChained:
    def test_threads_parent_id_into_child(self, temp_db: Database) -> None:
        ids = run_chained(temp_db, [InsertStep("lib", _library), InsertStep("ns", _namespace)])

        libraries, namespaces = _rows(temp_db)
        assert set(ids) == {"lib", "ns"}
        assert ids["lib"] == libraries[0].id
        assert ids["ns"] == namespaces[0].id
        assert namespaces[0].library_id == ids["lib"]

    def test_builder_sees_only_earlier_labels(self, temp_db: Database) -> None:
        seen: list[set[str]] = []

        def record(label: str):  # type: ignore[no-untyped-def]
            def build(ids: Mapping[str, int]) -> Library:
                seen.append(set(ids))
                return Library(name=label, version="1.0")

            return build

        run_chained(temp_db, [InsertStep(x, record(x)) for x in ("a", "b", "c")])

        assert seen == [set(), {"a"}, {"a", "b"}]

    def test_builder_cannot_mutate_ids(self, temp_db: Database) -> None:
        def tamper(ids: Mapping[str, int]) -> Namespace:
            ids["lib"] = 999  # type: ignore[index]
            return _namespace(ids)

        with pytest.raises(TypeError):
            run_chained(temp_db, [InsertStep("lib", _library), InsertStep("ns", tamper)])

    def test_failing_builder_rolls_back_every_step(self, temp_db: Database) -> None:
        def broken_namespace(ids: Mapping[str, int]) -> Namespace:
            assert ids["lib"] > 0
            raise RuntimeError("extraction produced garbage")

        with pytest.raises(RuntimeError, match="garbage"):
            run_chained(temp_db, [InsertStep("lib", _library), InsertStep("ns", broken_namespace)])

        libraries, namespaces = _rows(temp_db)
        assert libraries == []
        assert namespaces == []

    def test_failing_insert_rolls_back_every_step(self, temp_db: Database) -> None:
        def orphan(ids: Mapping[str, int]) -> Namespace:
            return Namespace(name="demo.core", version="1.0", library_id=ids["lib"] + 1000)

        with pytest.raises(Exception):  # noqa: B017 - foreign key violation
            run_chained(temp_db, [InsertStep("lib", _library), InsertStep("ns", orphan)])

        libraries, _ = _rows(temp_db)
        assert libraries == []

    def test_duplicate_label_rejected_before_writing(self, temp_db: Database) -> None:
        with pytest.raises(StoreError) as exc_info:
            run_chained(temp_db, [InsertStep("lib", _library), InsertStep("lib", _library)])

        assert exc_info.value.code == ErrorCode.CHAIN_DUPLICATE_LABEL
        libraries, _ = _rows(temp_db)
        assert libraries == []

    def test_empty_chain_returns_empty_mapping(self, temp_db: Database) -> None:
        assert run_chained(temp_db, []) == {}

    def test_step_may_return_id_from_nested_store(
        self, temp_db: Database, demo_library: LibraryRecord
    ) -> None:
        store = LibraryStore(temp_db)

        def upsert_library(ids: Mapping[str, int]) -> int | None:
            return store.store(demo_library).row_id

        steps = [
            InsertStep("lib", upsert_library),
            InsertStep("ns", _namespace),
        ]

        ids = run_chained(temp_db, steps)

        _, namespaces = _rows(temp_db)
        assert namespaces[0].library_id == ids["lib"]

    def test_nested_store_rolled_back_with_chain(
        self, temp_db: Database, demo_library: LibraryRecord
    ) -> None:
        store = LibraryStore(temp_db)

        def fail(ids: Mapping[str, int]) -> Namespace:
            raise RuntimeError("after the upsert")

        def upsert_library(ids: Mapping[str, int]) -> int | None:
            return store.store(demo_library).row_id

        steps = [
            InsertStep("lib", upsert_library),
            InsertStep("ns", fail),
        ]
        with pytest.raises(RuntimeError):
            run_chained(temp_db, steps)

        libraries, _ = _rows(temp_db)
        assert libraries == []
