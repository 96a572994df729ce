"""Thin client over the hosted Supabase tables and photo bucket.

Nothing here catches failures. Every call may raise (network, auth,
constraint violations) and callers decide whether to fall back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from supabase import Client, create_client

from doortrack.core.config import Settings

TABLES: frozenset[str] = frozenset({"orders", "pickup_requests", "user_roles"})

Row = dict[str, Any]
Filters = Mapping[str, Any]


class RemoteStoreClient:
    """Table and blob operations against the remote store."""

    def __init__(self, client: Client, bucket: str = "order-photos") -> None:
        self.client = client
        self.bucket = bucket

    def _table(self, table: str):
        if table not in TABLES:
            raise ValueError(f"Unknown remote table: {table}")
        return self.client.table(table)

    @staticmethod
    def _apply_filters(query, filters: Filters | None):
        for column, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        return query

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[Row]:
        query = self._apply_filters(self._table(table).select("*"), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        return list(query.execute().data or [])

    def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        return list(self._table(table).insert(list(rows)).execute().data or [])

    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        if not filters:
            raise ValueError("Refusing to update a remote table without filters")
        query = self._apply_filters(self._table(table).update(values), filters)
        return list(query.execute().data or [])

    def delete(self, table: str, filters: Filters) -> list[Row]:
        if not filters:
            raise ValueError("Refusing to delete from a remote table without filters")
        query = self._apply_filters(self._table(table).delete(), filters)
        return list(query.execute().data or [])

    def upsert(self, table: str, rows: Sequence[Row], on_conflict: str | None = None) -> list[Row]:
        query = self._table(table).upsert(list(rows), on_conflict=on_conflict or "")
        return list(query.execute().data or [])

    def upload_blob(self, path: str, data: bytes, content_type: str) -> str:
        """Upload to the photo bucket and return the public URL."""
        bucket = self.client.storage.from_(self.bucket)
        bucket.upload(path=path, file=data, file_options={"content-type": content_type})
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def remove_blobs(self, paths: Sequence[str]) -> None:
        self.client.storage.from_(self.bucket).remove(list(paths))


def create_remote_client(config: Settings) -> RemoteStoreClient:
    return RemoteStoreClient(
        create_client(config.supabase_url, config.supabase_anon_key),
        bucket=config.photo_bucket,
    )
