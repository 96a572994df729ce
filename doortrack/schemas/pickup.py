"""Pickup request schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

PickupStatus = Literal["pending", "completed"]


class PickupRequest(BaseModel):
    """Batched customer request to collect prepared orders."""

    id: str
    customer_id: str
    order_ids: list[str]
    requested_at: datetime
    status: PickupStatus = "pending"


class PickupRequestCreate(BaseModel):
    order_ids: list[str] = Field(min_length=1)
