"""Tests for the generic look-up-then-write reconciler."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from corpusdb.store import Database, StoreResult, UpsertAction, find_library, reconcile
from corpusdb.store.models import Library


def _insert(session: Session) -> str:
    session.add(Library(name="demo", version="1.0", description="inserted"))
    session.flush()
    return "inserted"


def _update(session: Session, existing: Library) -> str:
    existing.description = "updated"
    session.add(existing)
    return "updated"


def _lookup(session: Session) -> Library | None:
    return find_library(session, "demo", "1.0")


def _all(db: Database) -> list[Library]:
    with db.session() as session:
        return list(session.exec(select(Library)))


class TestReconcile:
    def test_inserts_when_lookup_finds_nothing(self, temp_db: Database) -> None:
        assert reconcile(temp_db, _lookup, _update, _insert) == "inserted"
        assert [lib.description for lib in _all(temp_db)] == ["inserted"]

    def test_updates_when_lookup_finds_row(self, temp_db: Database) -> None:
        reconcile(temp_db, _lookup, _update, _insert)

        assert reconcile(temp_db, _lookup, _update, _insert) == "updated"
        assert [lib.description for lib in _all(temp_db)] == ["updated"]

    def test_on_found_receives_existing_row(self, temp_db: Database) -> None:
        reconcile(temp_db, _lookup, _update, _insert)
        received: list[Library] = []

        reconcile(temp_db, _lookup, lambda s, row: received.append(row), _insert)

        assert len(received) == 1
        assert received[0].name == "demo"

    def test_insert_conflict_resolves_as_update(self, temp_db: Database) -> None:
        reconcile(temp_db, _lookup, _update, _insert)
        calls = 0

        def racing_lookup(session: Session) -> Library | None:
            # First look misses, as if a concurrent run inserted afterwards
            nonlocal calls
            calls += 1
            return None if calls == 1 else _lookup(session)

        result = reconcile(temp_db, racing_lookup, _update, _insert)

        assert result == "updated"
        assert calls == 2
        assert len(_all(temp_db)) == 1

    def test_conflict_without_matching_row_propagates(self, temp_db: Database) -> None:
        reconcile(temp_db, _lookup, _update, _insert)

        with pytest.raises(IntegrityError):
            reconcile(temp_db, lambda s: None, _update, _insert)
        assert len(_all(temp_db)) == 1

    def test_failure_rolls_back_lookup_transaction(self, temp_db: Database) -> None:
        def failing_insert(session: Session) -> str:
            _insert(session)
            raise RuntimeError("after insert")

        with pytest.raises(RuntimeError):
            reconcile(temp_db, _lookup, _update, failing_insert)
        assert _all(temp_db) == []


class TestStoreResult:
    def test_written_for_insert_and_update(self) -> None:
        assert StoreResult(UpsertAction.INSERTED, 1).written
        assert StoreResult(UpsertAction.UPDATED, 1).written

    def test_not_written_for_skip_and_failure(self) -> None:
        assert not StoreResult(UpsertAction.SKIPPED, reason="library not found").written
        assert not StoreResult(UpsertAction.FAILED, reason="boom").written
