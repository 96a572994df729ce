"""Storage port implementation over the remote tables."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from doortrack.schemas.order import Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole
from doortrack.storage.mapping import (
    order_to_domain,
    order_to_storage,
    order_update_to_storage,
    pickup_to_domain,
    pickup_to_storage,
    role_to_domain,
    role_to_storage,
)
from doortrack.storage.remote_client import RemoteStoreClient

logger = logging.getLogger(__name__)


class RemoteStore:
    """Reads and writes domain records through :class:`RemoteStoreClient`."""

    def __init__(self, client: RemoteStoreClient) -> None:
        self.client = client

    def list_orders(self) -> list[Order]:
        rows = self.client.select("orders", order_by="created_at", descending=True)
        return [order_to_domain(row) for row in rows]

    def get_order(self, order_id: str) -> Order | None:
        rows = self.client.select("orders", filters={"id": order_id})
        return order_to_domain(rows[0]) if rows else None

    def insert_order(self, order: Order) -> None:
        self.client.insert("orders", [order_to_storage(order)])

    def update_order(self, order_id: str, fields: dict[str, Any], updated_at: datetime) -> Order | None:
        rows = self.client.update("orders", order_update_to_storage(fields, updated_at), {"id": order_id})
        return order_to_domain(rows[0]) if rows else None

    def delete_orders(self, order_ids: Sequence[str]) -> int:
        if not order_ids:
            return 0
        return len(self.client.delete("orders", {"id": list(order_ids)}))

    def list_pickup_requests(self) -> list[PickupRequest]:
        rows = self.client.select("pickup_requests", order_by="requested_at", descending=True)
        return [pickup_to_domain(row) for row in rows]

    def save_pickup(self, request: PickupRequest, orders: Sequence[Order]) -> None:
        """Write all orders in one upsert, then the ledger row.

        The table API has no multi-table transaction, so a failed ledger
        insert restores the previous order rows before re-raising.
        """
        order_ids = [order.id for order in orders]
        previous = self.client.select("orders", filters={"id": order_ids}) if order_ids else []
        if order_ids:
            self.client.upsert("orders", [order_to_storage(order) for order in orders], on_conflict="id")
        try:
            self.client.insert("pickup_requests", [pickup_to_storage(request)])
        except Exception:
            logger.warning("[STORAGE] Pickup ledger insert failed; restoring %d orders", len(previous))
            if previous:
                try:
                    self.client.upsert("orders", previous, on_conflict="id")
                except Exception:
                    logger.exception("[STORAGE] Could not restore orders %s after failed pickup insert", order_ids)
            raise

    def get_role(self, user_id: str) -> UserRole | None:
        rows = self.client.select("user_roles", filters={"user_id": user_id})
        return role_to_domain(rows[0]) if rows else None

    def set_role(self, role: UserRole) -> None:
        self.client.upsert("user_roles", [role_to_storage(role)], on_conflict="user_id")
