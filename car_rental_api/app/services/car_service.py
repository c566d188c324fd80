"""
Business logic for cars.

``CarService`` lists, fetches, creates, updates and deletes cars and
rents them to users.  It never touches the database itself: the car
and rental models are passed to the constructor, which lets the API
inject the SQLite models and tests inject mocks.

Errors are raised as the exceptions from ``core.errors``.  Lookups of
unknown ids raise ``NotFoundError``; invalid input raises
``ValidationError`` before the data store is called.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

import pydantic

from ..core.config import settings
from ..core.errors import NotFoundError, ValidationError, format_validation_errors
from ..models.base import Car, CarModel, CarQuery, UserCar, UserCarModel
from ..schemas.car import CarCreate, CarFilter, CarUpdate
from ..schemas.pagination import Pagination
from .rental_service import RentalService


class CarService:
    """Service for managing cars and their rentals."""

    def __init__(
        self,
        car_model: CarModel,
        user_car_model: Optional[UserCarModel] = None,
        rental_service: Optional[RentalService] = None,
    ) -> None:
        self.car_model = car_model
        self.user_car_model = user_car_model
        if rental_service is None and user_car_model is not None:
            rental_service = RentalService(user_car_model)
        self.rental_service = rental_service

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @staticmethod
    def build_pagination(page: int = 1, page_size: Optional[int] = None, count: int = 0) -> Pagination:
        """Summarise a page of a list of ``count`` items.

        ``page_count`` is ``ceil(count / page_size)``.  A page past the
        last one is still described; it simply holds no items.
        """
        if page_size is None:
            page_size = settings.default_page_size
        if page < 1 or page_size < 1:
            raise ValidationError("page and pageSize must be positive")
        return Pagination(
            page=page,
            page_count=math.ceil(count / page_size),
            page_size=page_size,
            count=count,
        )

    async def list_cars(
        self,
        car_filter: Optional[CarFilter] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Car], int]:
        """Return one page of cars and the total number matching the filter.

        Cars are ordered newest first.  ``car_filter.size`` matches
        exactly and ``car_filter.name`` as a case-insensitive substring.
        With ``car_filter.available_at`` each car carries the rental
        that still runs at that moment in ``user_car``.
        """
        if page_size is None:
            page_size = settings.default_page_size
        if page < 1 or page_size < 1:
            raise ValidationError("page and pageSize must be positive")
        car_filter = car_filter or CarFilter()
        query = CarQuery(
            size=car_filter.size.value if car_filter.size else None,
            name=car_filter.name or None,
            available_at=car_filter.available_at,
            offset=(page - 1) * page_size,
            limit=page_size,
        )
        cars = await self.car_model.find_all(query)
        total = await self.car_model.count(query)
        return cars, total

    async def get_car(self, car_id: int) -> Car:
        """Return the car with ``car_id`` or raise ``NotFoundError``."""
        car = await self.car_model.find_by_pk(car_id)
        if car is None:
            raise NotFoundError(f"Car {car_id} not found")
        return car

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    async def create_car(self, data: Union[CarCreate, Dict[str, Any]]) -> Car:
        """Validate ``data`` and store it as a new car.

        Accepts a ``CarCreate`` or a plain dict with camelCase or
        snake_case keys.  Invalid input raises ``ValidationError``
        without calling the data store; errors from the store itself
        propagate unchanged.
        """
        logger = logging.getLogger(__name__)
        if not isinstance(data, CarCreate):
            try:
                data = CarCreate.model_validate(data)
            except pydantic.ValidationError as exc:
                raise ValidationError(format_validation_errors(exc.errors())) from exc
        car = await self.car_model.create(data.model_dump(mode="json"))
        logger.info("Created car %s '%s'", car.id, car.name)
        return car

    async def update_car(self, car_id: int, patch: Union[CarUpdate, Dict[str, Any]]) -> Car:
        """Merge ``patch`` into the car with ``car_id`` and persist it.

        Only fields present in ``patch`` change.  Raises
        ``NotFoundError`` for unknown ids and ``ValidationError`` for
        invalid fields.
        """
        logger = logging.getLogger(__name__)
        if not isinstance(patch, CarUpdate):
            try:
                patch = CarUpdate.model_validate(patch)
            except pydantic.ValidationError as exc:
                raise ValidationError(format_validation_errors(exc.errors())) from exc
        changes = patch.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        car = await self.get_car(car_id)
        car = await car.update(changes)
        logger.info("Updated car %s: %s", car_id, sorted(changes))
        return car

    async def delete_car(self, car_id: int) -> None:
        """Delete the car with ``car_id`` or raise ``NotFoundError``."""
        logger = logging.getLogger(__name__)
        car = await self.get_car(car_id)
        await car.destroy()
        logger.info("Deleted car %s", car_id)

    # ------------------------------------------------------------------
    # Renting
    # ------------------------------------------------------------------

    async def rent_car(
        self,
        car_id: int,
        user_id: int,
        rent_started_at: datetime,
        rent_ended_at: Optional[datetime] = None,
    ) -> UserCar:
        """Rent the car with ``car_id`` to ``user_id``.

        The car lookup is not guarded: ``NotFoundError`` and any error
        raised by the data store reach the caller untouched.  See
        ``RentalService.rent`` for the rest of the workflow.
        """
        if self.rental_service is None:
            raise RuntimeError("CarService was created without a rental model")
        car = await self.get_car(car_id)
        return await self.rental_service.rent(car, user_id, rent_started_at, rent_ended_at)
