"""Router aggregation."""

from __future__ import annotations

from fastapi import APIRouter

from smsdispatch.routers import health as health_router_module
from smsdispatch.routers import messaging as messaging_router_module

# Create aggregated router
api_router = APIRouter(prefix="/api")

# Include routers
api_router.include_router(health_router_module.router)
api_router.include_router(messaging_router_module.router)

__all__ = ["api_router"]
