"""Role selection endpoints."""

from fastapi import APIRouter, Depends

from doortrack.api.deps import AppServices, get_services
from doortrack.core.security import get_current_identity
from doortrack.schemas.identity import Identity
from doortrack.schemas.role import RoleResponse, RoleUpdate
from doortrack.services.role_service import get_user_role, set_user_role

router: APIRouter = APIRouter()


@router.get("/role", response_model=RoleResponse)
def read_role(
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> RoleResponse:
    return RoleResponse(user_id=identity.user_id, role=get_user_role(services.store, identity.user_id))


@router.put("/role", response_model=RoleResponse)
def choose_role(
    payload: RoleUpdate,
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> RoleResponse:
    stored = set_user_role(services.store, identity.user_id, payload.role)
    return RoleResponse(user_id=stored.user_id, role=stored.role)
