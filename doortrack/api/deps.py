"""Request dependencies shared by the API endpoints."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from doortrack.core.config import Settings
from doortrack.core.security import get_current_identity
from doortrack.schemas.identity import Identity
from doortrack.services.order_repository import OrderRepository
from doortrack.services.photo_storage import SupabasePhotoStorage
from doortrack.services.pickup_service import PickupLedger
from doortrack.services.role_service import get_user_role
from doortrack.storage.ports import StoragePort


class AppServices:
    """Everything the endpoints need, built once at startup."""

    def __init__(self, store: StoragePort, photos: SupabasePhotoStorage | None, config: Settings) -> None:
        self.store = store
        self.photos = photos
        self.settings = config
        self.repository = OrderRepository(store)
        self.ledger = PickupLedger(store, self.repository)


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def require_admin(
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> Identity:
    if get_user_role(services.store, identity.user_id) != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return identity
