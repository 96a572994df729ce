"""Conversion between domain records and flat remote table rows.

Remote rows use one snake_case column per value, with the embedded customer
record spread over ``customer_*`` columns. ``*_to_storage`` only emits
columns whose domain value is set, so an absent column always reads back as
``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from doortrack.schemas.order import CustomerInfo, Order
from doortrack.schemas.pickup import PickupRequest
from doortrack.schemas.role import UserRole

Row = dict[str, Any]

CUSTOMER_COLUMNS: dict[str, str] = {
    "name": "customer_name",
    "email": "customer_email",
    "phone": "customer_phone",
    "address": "customer_address",
}

ORDER_COLUMNS: tuple[str, ...] = (
    "id",
    "order_number",
    "order_message",
    "contact_person",
    "status",
    "created_at",
    "updated_at",
    "expected_delivery_date",
    "rejection_reason",
    "customer_id",
    "delivered_at",
    "photo_url",
)

IMMUTABLE_ORDER_FIELDS: frozenset[str] = frozenset({"id", "created_at", "updated_at"})


def _serialize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _date_value(value: Any) -> Any:
    # Older rows kept the full ISO timestamp of the chosen day.
    if isinstance(value, str) and len(value) > 10:
        return value[:10]
    return value


def _present(row: Mapping[str, Any]) -> Row:
    return {column: _serialize(value) for column, value in row.items() if value is not None}


def order_to_domain(row: Mapping[str, Any]) -> Order:
    return Order(
        id=row["id"],
        order_number=row["order_number"],
        status=row["status"],
        order_message=row.get("order_message"),
        contact_person=row.get("contact_person"),
        customer_info=CustomerInfo(
            **{field: row.get(column) for field, column in CUSTOMER_COLUMNS.items()}
        ),
        customer_id=row["customer_id"],
        photo_url=row.get("photo_url"),
        expected_delivery_date=_date_value(row.get("expected_delivery_date")),
        rejection_reason=row.get("rejection_reason"),
        delivered_at=row.get("delivered_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def order_to_storage(order: Order) -> Row:
    row: Row = {column: getattr(order, column) for column in ORDER_COLUMNS}
    for field, column in CUSTOMER_COLUMNS.items():
        row[column] = getattr(order.customer_info, field)
    return _present(row)


def check_order_update_fields(fields: Mapping[str, Any]) -> None:
    """Raise ValueError for fields a partial order update may not touch."""
    for field in fields:
        if field in IMMUTABLE_ORDER_FIELDS:
            raise ValueError(f"Order field {field!r} cannot be updated")
        if field != "customer_info" and field not in ORDER_COLUMNS:
            raise ValueError(f"Unknown order field: {field}")


def customer_info_update(value: CustomerInfo | Mapping[str, Any]) -> dict[str, Any]:
    """Only the customer fields the caller actually set."""
    info = value if isinstance(value, CustomerInfo) else CustomerInfo.model_validate(value)
    return {field: getattr(info, field) for field in info.model_fields_set}


def order_update_to_storage(fields: Mapping[str, Any], updated_at: datetime) -> Row:
    """Map a partial order update; ``updated_at`` is always written."""
    check_order_update_fields(fields)
    row: Row = {}
    for field, value in fields.items():
        if field == "customer_info":
            for info_field, info_value in customer_info_update(value).items():
                row[CUSTOMER_COLUMNS[info_field]] = info_value
        else:
            row[field] = value
    row["updated_at"] = updated_at
    return _present(row)


def pickup_to_domain(row: Mapping[str, Any]) -> PickupRequest:
    return PickupRequest(
        id=row["id"],
        customer_id=row["customer_id"],
        order_ids=list(row.get("order_ids") or []),
        requested_at=row["requested_at"],
        status=row.get("status") or "pending",
    )


def pickup_to_storage(request: PickupRequest) -> Row:
    return _present(
        {
            "id": request.id,
            "customer_id": request.customer_id,
            "order_ids": list(request.order_ids),
            "requested_at": request.requested_at,
            "status": request.status,
        }
    )


def role_to_domain(row: Mapping[str, Any]) -> UserRole:
    return UserRole(user_id=row["user_id"], role=row["role"], created_at=row["created_at"])


def role_to_storage(role: UserRole) -> Row:
    return _present({"user_id": role.user_id, "role": role.role, "created_at": role.created_at})
