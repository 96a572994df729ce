"""Key-value persistence of JSON record collections in the local database."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from doortrack.models.local_record import LocalRecord
from doortrack.storage.errors import LocalStorageError

ORDERS_COLLECTION: str = "orders"
PICKUP_REQUESTS_COLLECTION: str = "pickup_requests"
USER_ROLES_COLLECTION: str = "user_roles"
COLLECTIONS: frozenset[str] = frozenset({ORDERS_COLLECTION, PICKUP_REQUESTS_COLLECTION, USER_ROLES_COLLECTION})

Record = dict[str, Any]


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


class KeyValueStore:
    """Reads and writes whole collections of plain JSON records.

    Without a session factory there is no durable store: reads return an
    empty list and writes do nothing.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None) -> None:
        self._session_factory = session_factory

    @property
    def available(self) -> bool:
        return self._session_factory is not None

    def get(self, collection: str) -> list[Record]:
        _check_collection(collection)
        if self._session_factory is None:
            return []
        try:
            with self._session_factory() as db:
                record: LocalRecord | None = db.get(LocalRecord, collection)
                if record is None:
                    return []
                return [dict(item) for item in record.payload]
        except SQLAlchemyError as exc:
            raise LocalStorageError(f"Could not read local collection {collection!r}") from exc

    def put(self, collection: str, records: Sequence[Record]) -> None:
        self.put_many({collection: records})

    def put_many(self, collections: Mapping[str, Sequence[Record]]) -> None:
        """Replace several collections in a single transaction."""
        for collection in collections:
            _check_collection(collection)
        if self._session_factory is None:
            return
        try:
            with self._session_factory() as db:
                for collection, records in collections.items():
                    payload: list[Record] = [dict(item) for item in records]
                    record: LocalRecord | None = db.get(LocalRecord, collection)
                    if record is None:
                        db.add(LocalRecord(collection=collection, payload=payload))
                    else:
                        record.payload = payload
                db.commit()
        except SQLAlchemyError as exc:
            names = ", ".join(sorted(collections))
            raise LocalStorageError(f"Could not write local collections: {names}") from exc
