"""
Data-store layer.

``base`` declares the records handed to the service layer and the
abstract ``CarModel``/``UserCarModel`` interfaces the services depend
on.  ``car`` and ``user_car`` implement those interfaces on top of the
SQLite database from ``core.db``.  Services receive model instances
through their constructor, so tests can pass mocks instead.
"""

from .base import Car, CarModel, CarQuery, RentalQuery, UserCar, UserCarModel
from .car import SQLiteCarModel
from .user_car import SQLiteUserCarModel

__all__ = [
    "Car",
    "CarModel",
    "CarQuery",
    "RentalQuery",
    "UserCar",
    "UserCarModel",
    "SQLiteCarModel",
    "SQLiteUserCarModel",
]
