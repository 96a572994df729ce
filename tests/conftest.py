"""Shared fixtures: local store on a temp SQLite file and an in-memory Supabase fake."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from doortrack.db.session import build_session_factory
from doortrack.storage.kv_store import KeyValueStore
from doortrack.storage.local_store import LocalStore
from doortrack.storage.remote_client import RemoteStoreClient

PUBLIC_URL_PREFIX: str = "https://demo.supabase.co/storage/v1/object/public"


class RemoteUnavailable(RuntimeError):
    pass


class _Result:
    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class _Query:
    def __init__(self, table: "_Table", action: str, payload: Any = None, on_conflict: str = "") -> None:
        self.table = table
        self.action = action
        self.payload = payload
        self.on_conflict = on_conflict
        self.filters: list = []
        self.ordering: tuple[str, bool] | None = None

    def eq(self, column: str, value: Any) -> "_Query":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: list[Any]) -> "_Query":
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> "_Query":
        self.ordering = (column, desc)
        return self

    def execute(self) -> _Result:
        owner = self.table.owner
        owner.calls.append((self.table.name, self.action))
        if owner.offline or (self.table.name, self.action) in owner.failing:
            raise RemoteUnavailable(f"{self.table.name}.{self.action} unavailable")

        rows = self.table.rows
        matches = [row for row in rows if all(check(row) for check in self.filters)]
        if self.action == "select":
            result = [dict(row) for row in matches]
            if self.ordering is not None:
                column, desc = self.ordering
                result.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
            return _Result(result)
        if self.action == "insert":
            for row in self.payload:
                rows.append(dict(row))
            return _Result([dict(row) for row in self.payload])
        if self.action == "update":
            for row in matches:
                row.update(self.payload)
            return _Result([dict(row) for row in matches])
        if self.action == "delete":
            for row in matches:
                rows.remove(row)
            return _Result([dict(row) for row in matches])
        if self.action == "upsert":
            key = self.on_conflict or "id"
            for new_row in self.payload:
                existing = next((row for row in rows if row.get(key) == new_row.get(key)), None)
                if existing is None:
                    rows.append(dict(new_row))
                else:
                    existing.clear()
                    existing.update(new_row)
            return _Result([dict(row) for row in self.payload])
        raise AssertionError(f"unexpected action {self.action}")


class _Table:
    def __init__(self, owner: "FakeSupabase", name: str) -> None:
        self.owner = owner
        self.name = name
        self.rows = owner.tables.setdefault(name, [])

    def select(self, columns: str = "*") -> _Query:
        return _Query(self, "select")

    def insert(self, rows: list[dict[str, Any]]) -> _Query:
        return _Query(self, "insert", rows)

    def update(self, values: dict[str, Any]) -> _Query:
        return _Query(self, "update", values)

    def delete(self) -> _Query:
        return _Query(self, "delete")

    def upsert(self, rows: list[dict[str, Any]], on_conflict: str = "") -> _Query:
        return _Query(self, "upsert", rows, on_conflict)


class _Bucket:
    def __init__(self, owner: "FakeSupabase", name: str) -> None:
        self.owner = owner
        self.name = name

    def upload(self, path: str, file: bytes, file_options: dict[str, str] | None = None) -> None:
        if self.owner.offline or self.owner.fail_uploads:
            raise RemoteUnavailable("upload failed")
        self.owner.blobs[path] = file

    def get_public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_PREFIX}/{self.name}/{path}"

    def remove(self, paths: list[str]) -> None:
        if self.owner.offline:
            raise RemoteUnavailable("remove failed")
        for path in paths:
            self.owner.blobs.pop(path, None)
        self.owner.removed_blobs.extend(paths)


class _Storage:
    def __init__(self, owner: "FakeSupabase") -> None:
        self.owner = owner

    def from_(self, bucket: str) -> _Bucket:
        return _Bucket(self.owner, bucket)


class FakeSupabase:
    """Just enough of ``supabase.Client`` for the remote store client."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.blobs: dict[str, bytes] = {}
        self.removed_blobs: list[str] = []
        self.calls: list[tuple[str, str]] = []
        self.failing: set[tuple[str, str]] = set()
        self.offline = False
        self.fail_uploads = False
        self.storage = _Storage(self)

    def table(self, name: str) -> _Table:
        return _Table(self, name)


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
def local_store(tmp_path: Path) -> LocalStore:
    engine = _build_test_engine(tmp_path / "local_store.db")
    return LocalStore(KeyValueStore(build_session_factory(engine)))


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def remote_client(fake_supabase: FakeSupabase) -> RemoteStoreClient:
    return RemoteStoreClient(fake_supabase, bucket="order-photos")
