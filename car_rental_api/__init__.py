"""
Top-level package for the Car Rental API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``car_rental_api.app.main:app``.
"""

__all__ = []
