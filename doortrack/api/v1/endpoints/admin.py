"""Admin order decision endpoints."""

from fastapi import APIRouter, Depends, Query

from doortrack.api.deps import AppServices, get_services, require_admin
from doortrack.api.errors import workflow_http_error
from doortrack.schemas.identity import Identity
from doortrack.schemas.order import AcceptOrderRequest, CleanupResponse, Order, OrderGroups, RejectOrderRequest
from doortrack.schemas.pickup import PickupRequest
from doortrack.services.order_service import (
    accept_order,
    mark_delivered,
    mark_prepared,
    purge_expired_orders,
    reject_order,
)
from doortrack.services.order_status import OrderWorkflowError
from doortrack.services.order_views import group_orders, search_by_number

router: APIRouter = APIRouter()


@router.get("/orders", response_model=OrderGroups)
def list_orders(
    q: str | None = Query(default=None),
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> OrderGroups:
    """Return every order grouped for the admin dashboard tabs."""
    purge_expired_orders(services.repository, services.photos, retention_months=services.settings.order_retention_months)
    return group_orders(search_by_number(services.repository.list_all(), q))


@router.post("/orders/{order_id}/accept", response_model=Order)
def accept(
    order_id: str,
    payload: AcceptOrderRequest,
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> Order:
    try:
        return accept_order(services.repository, order_id, payload.expected_delivery_date)
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.post("/orders/{order_id}/reject", response_model=Order)
def reject(
    order_id: str,
    payload: RejectOrderRequest,
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> Order:
    try:
        return reject_order(services.repository, order_id, payload.rejection_reason)
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.post("/orders/{order_id}/prepare", response_model=Order)
def prepare(
    order_id: str,
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> Order:
    try:
        return mark_prepared(services.repository, order_id)
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.post("/orders/{order_id}/deliver", response_model=Order)
def deliver(
    order_id: str,
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> Order:
    try:
        return mark_delivered(services.repository, order_id)
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.post("/orders/cleanup", response_model=CleanupResponse)
def cleanup(
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> CleanupResponse:
    removed = purge_expired_orders(
        services.repository,
        services.photos,
        retention_months=services.settings.order_retention_months,
    )
    return CleanupResponse(removed_order_ids=[order.id for order in removed])


@router.get("/pickup-requests", response_model=list[PickupRequest])
def list_pickup_requests(
    _: Identity = Depends(require_admin),
    services: AppServices = Depends(get_services),
) -> list[PickupRequest]:
    return services.ledger.list_all()
