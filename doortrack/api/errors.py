"""Translate order workflow errors into HTTP errors."""

from fastapi import HTTPException, status

from doortrack.services.order_service import DuplicateOrderNumberError, OrderNotFoundError
from doortrack.services.order_status import OrderWorkflowError


def workflow_http_error(exc: OrderWorkflowError) -> HTTPException:
    if isinstance(exc, OrderNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    if isinstance(exc, DuplicateOrderNumberError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
