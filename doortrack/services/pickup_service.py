"""Pickup request ledger."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from uuid import uuid4

from doortrack.schemas.order import Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.services.order_repository import OrderRepository
from doortrack.services.order_status import InvalidTransitionError, OrderWorkflowError, apply_transition
from doortrack.storage.ports import StoragePort
from doortrack.utils.time import utc_now

logger = logging.getLogger(__name__)


class PickupRequestError(OrderWorkflowError):
    """Raised when a pickup request references unusable orders."""


class PickupLedger:
    """Records pickup requests together with the order transitions they cause."""

    def __init__(self, store: StoragePort, repository: OrderRepository | None = None) -> None:
        self.store = store
        self.repository = repository or OrderRepository(store)

    def create(self, customer_id: str, order_ids: Sequence[str], now: datetime | None = None) -> PickupRequest:
        """Validate every order first, then write the request and transitions at once."""
        unique_ids: list[str] = list(dict.fromkeys(order_ids))
        if not unique_ids:
            raise PickupRequestError("Select at least one prepared order")

        now = now or utc_now()
        transitioned: list[Order] = []
        for order_id in unique_ids:
            order = self.repository.get_by_id(order_id)
            if order is None or order.customer_id != customer_id:
                raise PickupRequestError(f"Order {order_id} not found")
            try:
                changes = apply_transition(order, "request_pickup", now=now)
            except InvalidTransitionError as exc:
                raise PickupRequestError(f"Order {order.order_number} is not ready for pickup") from exc
            transitioned.append(order.model_copy(update={**changes, "updated_at": now}))

        request = PickupRequest(
            id=str(uuid4()),
            customer_id=customer_id,
            order_ids=unique_ids,
            requested_at=now,
            status="pending",
        )
        self.store.save_pickup(request, transitioned)
        logger.info("[PICKUP] Customer %s requested pickup of %d orders", customer_id, len(unique_ids))
        return request

    def list_all(self) -> list[PickupRequest]:
        return self.store.list_pickup_requests()

    def list_for_customer(self, customer_id: str) -> list[PickupRequest]:
        return [request for request in self.list_all() if request.customer_id == customer_id]
