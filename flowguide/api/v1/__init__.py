"""API v1 routing configuration.

This module defines all v1 API routes.
"""

from fastapi import APIRouter

from flowguide.api.v1 import build_order

router = APIRouter()

# Domain routers
router.include_router(build_order.router, prefix="/build-order", tags=["Build Order"])


@router.get("/status", tags=["Status"])
async def api_status() -> dict[str, str]:
    """API v1 status check."""
    return {"status": "ok", "version": "v1"}
