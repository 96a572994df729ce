"""User role schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

UserRoleName = Literal["customer", "admin"]


class UserRole(BaseModel):
    user_id: str
    role: UserRoleName
    created_at: datetime


class RoleUpdate(BaseModel):
    role: UserRoleName


class RoleResponse(BaseModel):
    user_id: str
    role: UserRoleName
