"""Order reads and writes over the configured storage port."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from doortrack.schemas.order import Order
from doortrack.services.order_status import is_active
from doortrack.storage.mapping import check_order_update_fields
from doortrack.storage.ports import StoragePort
from doortrack.utils.time import ensure_utc, months_before, utc_now

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_MONTHS: int = 3


def is_expired(order: Order, cutoff: datetime) -> bool:
    """Delivered orders without a delivery timestamp never expire."""
    if order.status != "delivered" or order.delivered_at is None:
        return False
    return ensure_utc(order.delivered_at) < cutoff


class OrderRepository:
    """Unified order API; ordering of listings is not guaranteed."""

    def __init__(self, store: StoragePort) -> None:
        self.store = store

    def list_all(self) -> list[Order]:
        return self.store.list_orders()

    def list_by_customer(self, customer_id: str) -> list[Order]:
        return [order for order in self.list_all() if order.customer_id == customer_id]

    def list_by_status(self, status: str) -> list[Order]:
        return [order for order in self.list_all() if order.status == status]

    def list_active(self) -> list[Order]:
        return [order for order in self.list_all() if is_active(order.status)]

    def find_active_by_number(self, order_number: str) -> Order | None:
        for order in self.list_active():
            if order.order_number == order_number:
                return order
        return None

    def get_by_id(self, order_id: str) -> Order | None:
        return self.store.get_order(order_id)

    def create(self, order: Order, now: datetime | None = None) -> Order:
        now = now or utc_now()
        stored = order.model_copy(update={"created_at": now, "updated_at": now})
        self.store.insert_order(stored)
        logger.info("[ORDERS] Created order %s (number %s)", stored.id, stored.order_number)
        return stored

    def apply_update(
        self,
        order_id: str,
        fields: Mapping[str, Any],
        now: datetime | None = None,
    ) -> Order | None:
        """Merge ``fields`` into the order and stamp ``updated_at``.

        Returns None, without writing, when the order does not exist.
        Raises ValueError for ``id``, ``created_at``, ``updated_at`` and
        unknown fields before anything is written.
        """
        check_order_update_fields(fields)
        updated = self.store.update_order(order_id, dict(fields), now or utc_now())
        if updated is None:
            logger.warning("[ORDERS] Update skipped; order %s not found", order_id)
        return updated

    def cleanup_expired(
        self,
        now: datetime | None = None,
        retention_months: int = DEFAULT_RETENTION_MONTHS,
    ) -> list[Order]:
        """Delete delivered orders older than the retention window and return them."""
        cutoff = months_before(now or utc_now(), retention_months)
        expired = [order for order in self.list_all() if is_expired(order, cutoff)]
        if expired:
            self.store.delete_orders([order.id for order in expired])
            logger.info("[ORDERS] Removed %d orders delivered before %s", len(expired), cutoff.isoformat())
        return expired
