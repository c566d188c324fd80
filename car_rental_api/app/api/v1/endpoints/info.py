"""
Information endpoints for API v1.

``GET /info/health`` lets load balancers and uptime checks verify that
the API is serving requests and that its database can be opened.
"""

from typing import Dict

from fastapi import APIRouter

from car_rental_api.app.core.config import settings
from car_rental_api.app.core.db import get_cursor

router = APIRouter()


@router.get("/health")
async def health() -> Dict[str, str]:
    """Return ``{"status": "ok"}`` along with the API version."""
    with get_cursor() as cursor:
        cursor.execute("SELECT 1")
    return {"status": "ok", "version": settings.api_version}
