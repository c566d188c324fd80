"""
Shared FastAPI dependencies.

Endpoints obtain their service through ``get_car_service`` so that
tests can swap the SQLite-backed models for fakes with
``app.dependency_overrides[get_car_service]``.
"""

from car_rental_api.app.models.car import SQLiteCarModel
from car_rental_api.app.models.user_car import SQLiteUserCarModel
from car_rental_api.app.services.car_service import CarService


def get_car_service() -> CarService:
    """Build a ``CarService`` backed by the application database."""
    return CarService(car_model=SQLiteCarModel(), user_car_model=SQLiteUserCarModel())
