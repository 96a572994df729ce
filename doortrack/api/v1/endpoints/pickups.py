"""Customer pickup request endpoints."""

from fastapi import APIRouter, Depends

from doortrack.api.deps import AppServices, get_services
from doortrack.api.errors import workflow_http_error
from doortrack.core.security import get_current_identity
from doortrack.schemas.identity import Identity
from doortrack.schemas.pickup import PickupRequest, PickupRequestCreate
from doortrack.services.order_status import OrderWorkflowError

router: APIRouter = APIRouter()


@router.post("", response_model=PickupRequest, status_code=201)
def request_pickup(
    payload: PickupRequestCreate,
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> PickupRequest:
    """Request pickup of one or more prepared orders."""
    try:
        return services.ledger.create(identity.user_id, payload.order_ids)
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.get("/me", response_model=list[PickupRequest])
def get_my_pickup_requests(
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> list[PickupRequest]:
    return services.ledger.list_for_customer(identity.user_id)
