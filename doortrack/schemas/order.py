"""Order domain and API schemas."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "accepted", "prepared", "pickup_requested", "delivered", "rejected"]


class CustomerInfo(BaseModel):
    """Delivery contact embedded in an order."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class Order(BaseModel):
    """Stored door order."""

    id: str
    order_number: str
    status: OrderStatus = "pending"
    order_message: str | None = None
    contact_person: str | None = None
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo)
    customer_id: str
    photo_url: str | None = None
    expected_delivery_date: date | None = None
    rejection_reason: str | None = None
    delivered_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(extra="ignore")


class OrderCreate(BaseModel):
    """Customer input for placing an order."""

    order_number: str
    order_message: str | None = None
    contact_person: str | None = None
    customer_info: CustomerInfo = Field(default_factory=CustomerInfo)


class AcceptOrderRequest(BaseModel):
    expected_delivery_date: date


class RejectOrderRequest(BaseModel):
    rejection_reason: str


class OrderGroups(BaseModel):
    """Orders split the way the dashboards show them."""

    pending: list[Order] = Field(default_factory=list)
    in_progress: list[Order] = Field(default_factory=list)
    delivered: list[Order] = Field(default_factory=list)
    rejected: list[Order] = Field(default_factory=list)


class CleanupResponse(BaseModel):
    removed_order_ids: list[str]
