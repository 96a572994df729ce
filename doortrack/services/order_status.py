"""Order status transition helpers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from doortrack.schemas.order import Order

ORDER_STATUSES: list[str] = ["pending", "accepted", "prepared", "pickup_requested", "delivered", "rejected"]
ACTIVE_STATUSES: frozenset[str] = frozenset({"pending", "accepted", "prepared", "pickup_requested"})
TERMINAL_STATUSES: frozenset[str] = frozenset({"delivered", "rejected"})

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"accepted", "rejected"},
    "accepted": {"prepared"},
    "prepared": {"pickup_requested", "delivered"},
    "pickup_requested": {"delivered"},
    "delivered": set(),
    "rejected": set(),
}

# event -> (statuses it may start from, resulting status)
ORDER_EVENTS: dict[str, tuple[frozenset[str], str]] = {
    "accept": (frozenset({"pending"}), "accepted"),
    "reject": (frozenset({"pending"}), "rejected"),
    "mark_prepared": (frozenset({"accepted"}), "prepared"),
    "request_pickup": (frozenset({"prepared"}), "pickup_requested"),
    "mark_delivered": (frozenset({"prepared", "pickup_requested"}), "delivered"),
}


class OrderWorkflowError(Exception):
    """Base class for order rule violations reported to the caller."""


class InvalidTransitionError(OrderWorkflowError):
    """Raised when an event is not allowed from the order's current status."""


class TransitionInputError(OrderWorkflowError):
    """Raised when a transition is missing required input or the input is invalid."""


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def is_active(status: str) -> bool:
    return status in ACTIVE_STATUSES


def apply_transition(
    order: Order,
    event: str,
    *,
    now: datetime,
    delivery_date: date | None = None,
    reason: str | None = None,
) -> dict[str, Any]:
    """Validate ``event`` for ``order`` and return the fields it changes.

    The order itself is never modified; callers persist the returned fields
    in one update so the status and its decision field change together.
    """
    rule = ORDER_EVENTS.get(event)
    if rule is None:
        raise InvalidTransitionError(f"Unknown order event: {event}")
    sources, target = rule
    if order.status not in sources or not can_transition(order.status, target):
        raise InvalidTransitionError(
            f"Order {order.order_number} cannot move from {order.status} to {target}"
        )

    changes: dict[str, Any] = {"status": target}
    if event == "accept":
        if delivery_date is None:
            raise TransitionInputError("Expected delivery date is required to accept an order")
        if isinstance(delivery_date, datetime):
            delivery_date = delivery_date.date()
        if delivery_date < now.date():
            raise TransitionInputError("Expected delivery date cannot be in the past")
        changes["expected_delivery_date"] = delivery_date
    elif event == "reject":
        cleaned_reason = (reason or "").strip()
        if not cleaned_reason:
            raise TransitionInputError("Rejection reason is required")
        changes["rejection_reason"] = cleaned_reason
    elif event == "mark_delivered":
        changes["delivered_at"] = now
    return changes
