"""API v1 router composition."""

from fastapi import APIRouter

from doortrack.api.v1.endpoints import admin, orders, pickups, roles

api_router: APIRouter = APIRouter()
api_router.include_router(roles.router, prefix="/me", tags=["roles"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(pickups.router, prefix="/pickup-requests", tags=["pickups"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
