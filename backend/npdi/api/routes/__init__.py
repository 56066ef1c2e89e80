"""API Routes module"""
from fastapi import APIRouter

from .tickets import router as tickets_router
from .templates import router as templates_router

# Main API router
api_router = APIRouter()

api_router.include_router(tickets_router, prefix="/tickets", tags=["Tickets"])
api_router.include_router(templates_router, prefix="/templates", tags=["Templates"])

__all__ = ["api_router"]
