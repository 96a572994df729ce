"""Dashboard helpers: the repository gives no ordering, these add it."""

from __future__ import annotations

from collections.abc import Iterable

from doortrack.schemas.order import Order, OrderGroups

IN_PROGRESS_STATUSES: frozenset[str] = frozenset({"accepted", "prepared", "pickup_requested"})


def sort_by_order_number(orders: Iterable[Order]) -> list[Order]:
    """Lexicographic by order number, the way the dashboards list them."""
    return sorted(orders, key=lambda order: order.order_number)


def search_by_number(orders: Iterable[Order], query: str | None) -> list[Order]:
    needle = (query or "").strip()
    if not needle:
        return list(orders)
    return [order for order in orders if needle in order.order_number]


def group_orders(orders: Iterable[Order]) -> OrderGroups:
    groups = OrderGroups()
    for order in sort_by_order_number(orders):
        if order.status == "pending":
            groups.pending.append(order)
        elif order.status in IN_PROGRESS_STATUSES:
            groups.in_progress.append(order)
        elif order.status == "delivered":
            groups.delivered.append(order)
        elif order.status == "rejected":
            groups.rejected.append(order)
    return groups


def prepared_orders(orders: Iterable[Order]) -> list[Order]:
    """Orders a customer can currently include in a pickup request."""
    return sort_by_order_number(order for order in orders if order.status == "prepared")
