"""Storage port implementation over the local key-value store."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from doortrack.schemas.order import Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole
from doortrack.storage.errors import LocalStorageError
from doortrack.storage.kv_store import (
    ORDERS_COLLECTION,
    PICKUP_REQUESTS_COLLECTION,
    USER_ROLES_COLLECTION,
    KeyValueStore,
    Record,
)
from doortrack.storage.mapping import check_order_update_fields, customer_info_update


def _dump(model: Order | PickupRequest | UserRole) -> Record:
    return model.model_dump(mode="json")


class LocalStore:
    """Keeps every collection as a JSON list; order is insertion order."""

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    def list_orders(self) -> list[Order]:
        return [Order.model_validate(record) for record in self.kv.get(ORDERS_COLLECTION)]

    def get_order(self, order_id: str) -> Order | None:
        for order in self.list_orders():
            if order.id == order_id:
                return order
        return None

    def insert_order(self, order: Order) -> None:
        records = self.kv.get(ORDERS_COLLECTION)
        records.append(_dump(order))
        self.kv.put(ORDERS_COLLECTION, records)

    def update_order(self, order_id: str, fields: dict[str, Any], updated_at: datetime) -> Order | None:
        check_order_update_fields(fields)
        orders = self.list_orders()
        for index, existing in enumerate(orders):
            if existing.id != order_id:
                continue
            changes = dict(fields)
            if "customer_info" in changes:
                changes["customer_info"] = existing.customer_info.model_copy(
                    update=customer_info_update(changes["customer_info"])
                )
            merged = {**existing.model_dump(), **changes, "updated_at": updated_at}
            orders[index] = Order.model_validate(merged)
            self.replace_orders(orders)
            return orders[index]
        return None

    def delete_orders(self, order_ids: Sequence[str]) -> int:
        doomed = set(order_ids)
        orders = self.list_orders()
        kept = [order for order in orders if order.id not in doomed]
        removed = len(orders) - len(kept)
        if removed:
            self.replace_orders(kept)
        return removed

    def replace_orders(self, orders: Sequence[Order]) -> None:
        self.kv.put(ORDERS_COLLECTION, [_dump(order) for order in orders])

    def list_pickup_requests(self) -> list[PickupRequest]:
        return [PickupRequest.model_validate(record) for record in self.kv.get(PICKUP_REQUESTS_COLLECTION)]

    def save_pickup(self, request: PickupRequest, orders: Sequence[Order]) -> None:
        changed: dict[str, Order] = {order.id: order for order in orders}
        order_records = [
            _dump(changed.pop(order.id, order)) for order in self.list_orders()
        ]
        if changed:
            missing = ", ".join(sorted(changed))
            raise LocalStorageError(f"Cannot record pickup for orders missing locally: {missing}")
        requests = self.kv.get(PICKUP_REQUESTS_COLLECTION)
        requests.append(_dump(request))
        self.kv.put_many(
            {
                ORDERS_COLLECTION: order_records,
                PICKUP_REQUESTS_COLLECTION: requests,
            }
        )

    def get_role(self, user_id: str) -> UserRole | None:
        for record in self.kv.get(USER_ROLES_COLLECTION):
            if record.get("user_id") == user_id:
                return UserRole.model_validate(record)
        return None

    def set_role(self, role: UserRole) -> None:
        records = [record for record in self.kv.get(USER_ROLES_COLLECTION) if record.get("user_id") != role.user_id]
        records.append(_dump(role))
        self.kv.put(USER_ROLES_COLLECTION, records)
