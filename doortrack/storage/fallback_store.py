"""Remote-first storage with a single hop to the local store on failure."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, TypeVar

from pydantic import ValidationError

from doortrack.schemas.order import Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole
from doortrack.storage.errors import LocalStorageError, StorageUnavailableError
from doortrack.storage.local_store import LocalStore
from doortrack.storage.ports import StoragePort

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE: str = "Operation failed, please try again."


class FallbackStore:
    """Try the remote store, then the local store.

    The local store is a degrade path: after a successful remote order
    listing it receives a copy of the result, but nothing written locally is
    ever pushed back to the remote store. Rejected input (`ValueError`,
    pydantic `ValidationError`) is raised as is and never retried locally.
    """

    def __init__(self, primary: StoragePort, fallback: LocalStore) -> None:
        self.primary = primary
        self.fallback = fallback

    def _call(self, operation: str, remote: Callable[[], T], local: Callable[[], T]) -> T:
        try:
            return remote()
        except (ValueError, ValidationError):
            # Rejected input, not an unreachable store.
            raise
        except Exception:
            logger.warning("[STORAGE] Remote %s failed; using local store", operation, exc_info=True)
        try:
            return local()
        except LocalStorageError as exc:
            logger.error("[STORAGE] Local %s failed after remote failure: %s", operation, exc)
            raise StorageUnavailableError(GENERIC_FAILURE_MESSAGE) from exc

    def list_orders(self) -> list[Order]:
        try:
            orders = self.primary.list_orders()
        except (ValueError, ValidationError):
            raise
        except Exception:
            logger.warning("[STORAGE] Remote list_orders failed; using local store", exc_info=True)
            try:
                return self.fallback.list_orders()
            except LocalStorageError as exc:
                raise StorageUnavailableError(GENERIC_FAILURE_MESSAGE) from exc

        try:
            self.fallback.replace_orders(orders)
        except LocalStorageError:
            logger.warning("[STORAGE] Could not refresh local order mirror", exc_info=True)
        return orders

    def get_order(self, order_id: str) -> Order | None:
        return self._call(
            "get_order",
            lambda: self.primary.get_order(order_id),
            lambda: self.fallback.get_order(order_id),
        )

    def insert_order(self, order: Order) -> None:
        self._call(
            "insert_order",
            lambda: self.primary.insert_order(order),
            lambda: self.fallback.insert_order(order),
        )

    def update_order(self, order_id: str, fields: dict[str, Any], updated_at: datetime) -> Order | None:
        return self._call(
            "update_order",
            lambda: self.primary.update_order(order_id, fields, updated_at),
            lambda: self.fallback.update_order(order_id, fields, updated_at),
        )

    def delete_orders(self, order_ids: Sequence[str]) -> int:
        return self._call(
            "delete_orders",
            lambda: self.primary.delete_orders(order_ids),
            lambda: self.fallback.delete_orders(order_ids),
        )

    def list_pickup_requests(self) -> list[PickupRequest]:
        return self._call(
            "list_pickup_requests",
            self.primary.list_pickup_requests,
            self.fallback.list_pickup_requests,
        )

    def save_pickup(self, request: PickupRequest, orders: Sequence[Order]) -> None:
        self._call(
            "save_pickup",
            lambda: self.primary.save_pickup(request, orders),
            lambda: self.fallback.save_pickup(request, orders),
        )

    def get_role(self, user_id: str) -> UserRole | None:
        return self._call(
            "get_role",
            lambda: self.primary.get_role(user_id),
            lambda: self.fallback.get_role(user_id),
        )

    def set_role(self, role: UserRole) -> None:
        self._call(
            "set_role",
            lambda: self.primary.set_role(role),
            lambda: self.fallback.set_role(role),
        )
