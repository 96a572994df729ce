"""Customer order endpoints."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from doortrack.api.deps import AppServices, get_services
from doortrack.api.errors import workflow_http_error
from doortrack.core.security import get_current_identity
from doortrack.schemas.identity import Identity
from doortrack.schemas.order import CustomerInfo, Order, OrderCreate, OrderGroups
from doortrack.services.order_service import place_order, purge_expired_orders
from doortrack.services.order_status import OrderWorkflowError
from doortrack.services.order_views import group_orders, prepared_orders, search_by_number
from doortrack.services.photo_storage import PhotoUpload

router: APIRouter = APIRouter()


def _read_photo(photo: UploadFile | None) -> PhotoUpload | None:
    if photo is None:
        return None
    data: bytes = photo.file.read()
    if not data:
        return None
    return PhotoUpload(
        data=data,
        filename=photo.filename or "photo.jpg",
        content_type=photo.content_type or "image/jpeg",
    )


@router.post("", response_model=Order, status_code=201)
def create_order(
    order_number: str = Form(...),
    order_message: str | None = Form(default=None),
    contact_person: str | None = Form(default=None),
    customer_name: str | None = Form(default=None),
    customer_email: str | None = Form(default=None),
    customer_phone: str | None = Form(default=None),
    customer_address: str | None = Form(default=None),
    photo: UploadFile | None = File(default=None),
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> Order:
    """Place a new pending order with its door photo."""
    payload = OrderCreate(
        order_number=order_number,
        order_message=order_message,
        contact_person=contact_person,
        customer_info=CustomerInfo(
            name=customer_name,
            email=customer_email or identity.primary_email,
            phone=customer_phone,
            address=customer_address,
        ),
    )
    try:
        return place_order(
            services.repository,
            services.photos,
            customer_id=identity.user_id,
            payload=payload,
            photo=_read_photo(photo),
        )
    except OrderWorkflowError as exc:
        raise workflow_http_error(exc) from exc


@router.get("/me", response_model=OrderGroups)
def get_my_orders(
    q: str | None = Query(default=None),
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> OrderGroups:
    """Return the caller's orders grouped for the dashboard tabs."""
    purge_expired_orders(services.repository, services.photos, retention_months=services.settings.order_retention_months)
    orders = services.repository.list_by_customer(identity.user_id)
    return group_orders(search_by_number(orders, q))


@router.get("/me/prepared", response_model=list[Order])
def get_my_prepared_orders(
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> list[Order]:
    return prepared_orders(services.repository.list_by_customer(identity.user_id))


@router.get("/{order_id}", response_model=Order)
def get_my_order(
    order_id: str,
    identity: Identity = Depends(get_current_identity),
    services: AppServices = Depends(get_services),
) -> Order:
    order = services.repository.get_by_id(order_id)
    if order is None or order.customer_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
