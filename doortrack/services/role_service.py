"""User role lookups and role selection."""

from __future__ import annotations

from datetime import datetime

from doortrack.schemas.role import UserRole
from doortrack.storage.ports import StoragePort
from doortrack.utils.time import utc_now

USER_ROLES: tuple[str, ...] = ("customer", "admin")
DEFAULT_ROLE: str = "customer"


def normalize_user_role(role: str) -> str:
    normalized = str(role or "").strip().lower()
    if normalized not in USER_ROLES:
        raise ValueError(f"Invalid role: {role}")
    return normalized


def get_user_role(store: StoragePort, user_id: str) -> str:
    """Return the stored role; users without one are customers."""
    stored = store.get_role(user_id)
    return stored.role if stored is not None else DEFAULT_ROLE


def set_user_role(store: StoragePort, user_id: str, role: str, now: datetime | None = None) -> UserRole:
    """Create or overwrite the user's role, keeping the first creation time."""
    existing = store.get_role(user_id)
    user_role = UserRole(
        user_id=user_id,
        role=normalize_user_role(role),
        created_at=existing.created_at if existing is not None else (now or utc_now()),
    )
    store.set_role(user_role)
    return user_role
