"""
Records and abstract data-store interfaces.

Records are plain data objects.  A ``Car`` loaded from a model keeps a
reference to that model so that callers can persist changes with
``await car.update(patch)`` and remove it with ``await car.destroy()``.
A ``Car`` built by hand (``Car(name=..., price=...)``) has no model
and cannot be persisted until it is passed to ``CarModel.create``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class UserCar:
    """A rental of ``car_id`` by ``user_id``."""

    user_id: int
    car_id: int
    rent_started_at: datetime
    rent_ended_at: datetime
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Car:
    name: Optional[str] = None
    price: Optional[float] = None
    size: Optional[str] = None
    image: Optional[str] = None
    is_currently_rented: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_car: Optional[UserCar] = None
    _model: Optional["CarModel"] = field(default=None, repr=False, compare=False)

    async def update(self, patch: Dict[str, Any]) -> "Car":
        """Merge ``patch`` into this car and persist it."""
        if self._model is None:
            raise RuntimeError("Car is not bound to a data store")
        return await self._model.update(self, patch)

    async def destroy(self) -> None:
        """Remove this car from its data store."""
        if self._model is None:
            raise RuntimeError("Car is not bound to a data store")
        await self._model.destroy(self.id)


@dataclass
class CarQuery:
    """Criteria for ``CarModel.find_all`` and ``CarModel.count``.

    ``size`` matches exactly, ``name`` is a case-insensitive substring.
    When ``available_at`` is set, each returned car carries in
    ``user_car`` its rental that ends at or after that moment.
    ``offset``/``limit`` are ignored by ``count``.
    """

    size: Optional[str] = None
    name: Optional[str] = None
    available_at: Optional[datetime] = None
    offset: int = 0
    limit: Optional[int] = None


@dataclass
class RentalQuery:
    """Criteria for ``UserCarModel.find_one``: a rental of ``car_id``
    whose end is strictly after ``ends_after``."""

    car_id: int
    ends_after: datetime


class CarModel(ABC):
    @abstractmethod
    async def find_all(self, query: CarQuery) -> List[Car]: ...

    @abstractmethod
    async def count(self, query: CarQuery) -> int: ...

    @abstractmethod
    async def find_by_pk(self, car_id: int) -> Optional[Car]: ...

    @abstractmethod
    async def create(self, attrs: Dict[str, Any]) -> Car: ...

    @abstractmethod
    async def update(self, car: Car, patch: Dict[str, Any]) -> Car: ...

    @abstractmethod
    async def destroy(self, car_id: int) -> None: ...


class UserCarModel(ABC):
    @abstractmethod
    async def find_one(self, query: RentalQuery) -> Optional[UserCar]: ...

    @abstractmethod
    async def create(self, attrs: Dict[str, Any]) -> UserCar: ...
