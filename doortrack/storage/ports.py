"""Storage port shared by the local, remote and fallback implementations."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

from doortrack.schemas.order import Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole


class StoragePort(Protocol):
    """Persistence operations the repository, ledger and role service rely on."""

    def list_orders(self) -> list[Order]: ...

    def get_order(self, order_id: str) -> Order | None: ...

    def insert_order(self, order: Order) -> None: ...

    def update_order(self, order_id: str, fields: dict[str, Any], updated_at: datetime) -> Order | None: ...

    def delete_orders(self, order_ids: Sequence[str]) -> int: ...

    def list_pickup_requests(self) -> list[PickupRequest]: ...

    def save_pickup(self, request: PickupRequest, orders: Sequence[Order]) -> None:
        """Persist the ledger row and the transitioned orders as one write."""
        ...

    def get_role(self, user_id: str) -> UserRole | None: ...

    def set_role(self, role: UserRole) -> None: ...
