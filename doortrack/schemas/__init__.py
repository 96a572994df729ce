"""Schema exports."""

from doortrack.schemas.identity import Identity
from doortrack.schemas.order import (
    AcceptOrderRequest,
    CleanupResponse,
    CustomerInfo,
    Order,
    OrderCreate,
    OrderGroups,
    OrderStatus,
    RejectOrderRequest,
)
from doortrack.schemas.pickup import PickupRequest, PickupRequestCreate, PickupStatus
from doortrack.schemas.role import RoleResponse, RoleUpdate, UserRole, UserRoleName

__all__ = [
    "Identity",
    "AcceptOrderRequest",
    "CleanupResponse",
    "CustomerInfo",
    "Order",
    "OrderCreate",
    "OrderGroups",
    "OrderStatus",
    "RejectOrderRequest",
    "PickupRequest",
    "PickupRequestCreate",
    "PickupStatus",
    "RoleResponse",
    "RoleUpdate",
    "UserRole",
    "UserRoleName",
]
