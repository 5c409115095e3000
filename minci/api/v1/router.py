"""API v1 router combining all endpoints"""
from fastapi import APIRouter

from minci.api.v1.endpoints import reports, dashboard

router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
router.include_router(reports.router)
router.include_router(dashboard.router)

__all__ = ["router"]
