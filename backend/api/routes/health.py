"""
api/routes/health.py
--------------------
Liveness probe plus the optimizer limits the frontend needs to know.
"""
from __future__ import annotations

from fastapi import APIRouter

import config

router = APIRouter()


@router.get("/health", summary="Health check")
def health() -> dict:
    return {
        "status": "ok",
        "service": "spotlight-route",
        "limits": {
            "max_waypoints": config.ROUTE_MAX_WAYPOINTS,
            "strict_validation": config.ROUTE_STRICT_VALIDATION,
        },
    }
