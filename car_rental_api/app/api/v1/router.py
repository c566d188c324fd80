"""
Top-level router for version 1 of the API.

This router aggregates the domain-specific routers under a unified
prefix.  When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import cars, info

router = APIRouter()

router.include_router(cars.router, prefix="/cars", tags=["cars"])
router.include_router(info.router, prefix="/info", tags=["info"])
