"""
Pydantic models for car data.

``CarBase`` holds the fields shared by requests and responses;
``CarCreate`` is the body of ``POST /cars``, ``CarUpdate`` the body of
``PUT /cars/{id}`` and ``CarRead`` the representation returned by the
API.  Field names are snake_case in Python and camelCase on the wire
(``isCurrentlyRented``, ``createdAt``); requests may use either.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .pagination import Pagination
from .rental import UserCarRead


class CarSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class CamelModel(BaseModel):
    """Base model that serialises field names in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CarBase(CamelModel):
    name: str = Field(..., min_length=1, examples=["mobil test"])
    price: float = Field(..., gt=0, examples=[100000])
    size: CarSize = Field(..., examples=["large"])
    image: Optional[str] = Field(None, examples=["gambar-test.png"])
    is_currently_rented: bool = False


class CarCreate(CarBase):
    """Schema for creating a car."""
    pass


class CarUpdate(CamelModel):
    """Schema for updating a car.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    size: Optional[CarSize] = None
    image: Optional[str] = None
    is_currently_rented: Optional[bool] = None


class CarRead(CarBase):
    """Schema for reading a car from the API."""

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # The rental that makes the car unavailable at the time asked for
    # in the list query, if any.
    user_car: Optional[UserCarRead] = None


class CarFilter(CamelModel):
    """Optional filters accepted by ``GET /cars``."""

    size: Optional[CarSize] = None
    name: Optional[str] = None
    available_at: Optional[datetime] = None


class CarListMeta(CamelModel):
    pagination: Pagination


class CarListResponse(CamelModel):
    cars: List[CarRead]
    meta: CarListMeta
