"""
Business logic for renting a car.

``RentalService`` creates ``user_cars`` rows for a car that has already
been looked up.  It works out when the rental ends, refuses to rent a
car that still has a rental running past the requested start, and
stores the new rental.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..core.config import settings
from ..core.errors import CarAlreadyRentedError, ValidationError
from ..models.base import Car, RentalQuery, UserCar, UserCarModel


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RentalService:
    """Service for creating rentals."""

    def __init__(self, user_car_model: UserCarModel, rental_days: Optional[int] = None) -> None:
        self.user_car_model = user_car_model
        self.rental_days = rental_days if rental_days is not None else settings.rental_default_days

    def resolve_rent_ended_at(
        self, rent_started_at: datetime, rent_ended_at: Optional[datetime] = None
    ) -> datetime:
        """Return the end of the rental.

        Uses ``rent_ended_at`` when given, otherwise ``rent_started_at``
        plus the default rental length.  Raises ``ValidationError`` when
        the given end is not after the start, or when the default end
        falls outside the supported date range.
        """
        if rent_ended_at is None:
            try:
                return rent_started_at + timedelta(days=self.rental_days)
            except OverflowError as exc:
                raise ValidationError("rentStartedAt is too late to compute a rental end") from exc
        if ensure_utc(rent_ended_at) <= ensure_utc(rent_started_at):
            raise ValidationError("rentEndedAt must be after rentStartedAt")
        return rent_ended_at

    async def rent(
        self,
        car: Car,
        user_id: int,
        rent_started_at: datetime,
        rent_ended_at: Optional[datetime] = None,
    ) -> UserCar:
        """Rent ``car`` to ``user_id`` starting at ``rent_started_at``.

        Raises ``CarAlreadyRentedError`` if the car has a rental that
        ends after ``rent_started_at``.
        """
        logger = logging.getLogger(__name__)
        rent_ended_at = self.resolve_rent_ended_at(rent_started_at, rent_ended_at)

        active_rent = await self.user_car_model.find_one(
            RentalQuery(car_id=car.id, ends_after=rent_started_at)
        )
        if active_rent is not None:
            logger.info(
                "Car %s already rented until %s; refusing rental for user %s",
                car.id,
                active_rent.rent_ended_at,
                user_id,
            )
            raise CarAlreadyRentedError(car.id)

        user_car = await self.user_car_model.create(
            {
                "user_id": user_id,
                "car_id": car.id,
                "rent_started_at": rent_started_at,
                "rent_ended_at": rent_ended_at,
            }
        )
        logger.info("User %s rented car %s from %s to %s", user_id, car.id, rent_started_at, rent_ended_at)
        return user_car
