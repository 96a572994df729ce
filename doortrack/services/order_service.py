"""Order placement and admin decision workflows."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any
from uuid import uuid4

from doortrack.schemas.order import Order, OrderCreate
from doortrack.services.order_repository import DEFAULT_RETENTION_MONTHS, OrderRepository
from doortrack.services.order_status import OrderWorkflowError, apply_transition
from doortrack.services.photo_storage import PhotoUpload, SupabasePhotoStorage, photo_key
from doortrack.utils.time import utc_now

logger = logging.getLogger(__name__)

ORDER_NUMBER_PATTERN: re.Pattern[str] = re.compile(r"^[0-9]+$")


class InvalidOrderNumberError(OrderWorkflowError):
    """Raised when an order number is not a plain numeric string."""


class DuplicateOrderNumberError(OrderWorkflowError):
    """Raised when an active order already uses the requested number."""


class MissingPhotoError(OrderWorkflowError):
    """Raised when an order is placed without a photo."""


class OrderNotFoundError(OrderWorkflowError):
    """Raised when a workflow targets an order that does not exist."""


def validate_order_number(value: str) -> str:
    """Return the stripped order number or raise if it is not numeric."""
    cleaned = (value or "").strip()
    if not ORDER_NUMBER_PATTERN.match(cleaned):
        raise InvalidOrderNumberError("Order number must contain digits only")
    return cleaned


def ensure_order_number_available(repository: OrderRepository, order_number: str) -> None:
    """Numbers are unique among active orders only; finished orders free them."""
    existing = repository.find_active_by_number(order_number)
    if existing is not None:
        raise DuplicateOrderNumberError(f"Order number {order_number} is already in use")


def place_order(
    repository: OrderRepository,
    photos: SupabasePhotoStorage | None,
    *,
    customer_id: str,
    payload: OrderCreate,
    photo: PhotoUpload | None,
    now: datetime | None = None,
) -> Order:
    """Validate and store a new pending order with its photo.

    A failed upload does not lose the order; it is saved without ``photo_url``.
    """
    order_number = validate_order_number(payload.order_number)
    if photo is None or not photo.data:
        raise MissingPhotoError("A photo of the door is required")
    ensure_order_number_available(repository, order_number)

    now = now or utc_now()
    order_id = str(uuid4())
    photo_url: str | None = None
    if photos is None:
        logger.info("[ORDERS] Photo storage not configured; order %s saved without photo", order_id)
    else:
        photo_url = photos.upload(photo, photo_key(order_id, int(now.timestamp() * 1000), photo.extension))
        if photo_url is None:
            logger.warning("[ORDERS] Photo upload failed; order %s saved without photo", order_id)

    order = Order(
        id=order_id,
        order_number=order_number,
        status="pending",
        order_message=payload.order_message,
        contact_person=payload.contact_person,
        customer_info=payload.customer_info,
        customer_id=customer_id,
        photo_url=photo_url,
        created_at=now,
        updated_at=now,
    )
    return repository.create(order, now=now)


def _transition(
    repository: OrderRepository,
    order_id: str,
    event: str,
    now: datetime | None = None,
    **inputs: Any,
) -> Order:
    now = now or utc_now()
    order = repository.get_by_id(order_id)
    if order is None:
        raise OrderNotFoundError(f"Order {order_id} not found")

    changes = apply_transition(order, event, now=now, **inputs)
    updated = repository.apply_update(order_id, changes, now=now)
    if updated is None:
        raise OrderNotFoundError(f"Order {order_id} not found")
    logger.info("[ORDERS] Order %s: %s -> %s", order.order_number, order.status, updated.status)
    return updated


def accept_order(
    repository: OrderRepository,
    order_id: str,
    delivery_date: date | None,
    now: datetime | None = None,
) -> Order:
    return _transition(repository, order_id, "accept", now=now, delivery_date=delivery_date)


def reject_order(
    repository: OrderRepository,
    order_id: str,
    reason: str | None,
    now: datetime | None = None,
) -> Order:
    return _transition(repository, order_id, "reject", now=now, reason=reason)


def mark_prepared(repository: OrderRepository, order_id: str, now: datetime | None = None) -> Order:
    return _transition(repository, order_id, "mark_prepared", now=now)


def mark_delivered(repository: OrderRepository, order_id: str, now: datetime | None = None) -> Order:
    return _transition(repository, order_id, "mark_delivered", now=now)


def purge_expired_orders(
    repository: OrderRepository,
    photos: SupabasePhotoStorage | None,
    now: datetime | None = None,
    retention_months: int = DEFAULT_RETENTION_MONTHS,
) -> list[Order]:
    """Run the retention cleanup and drop stored photos of purged orders."""
    removed = repository.cleanup_expired(now=now, retention_months=retention_months)
    if photos is not None:
        for order in removed:
            if order.photo_url:
                photos.delete(order.photo_url)
    return removed
