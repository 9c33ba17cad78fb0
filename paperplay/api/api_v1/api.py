from fastapi import APIRouter

from paperplay.api.api_v1.endpoints import tickets, letters, orders, admin

api_router = APIRouter()
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(letters.router, prefix="/letters", tags=["letters"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])

api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
