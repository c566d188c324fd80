"""
Pydantic models for renting a car.

A rental (``user_cars`` row) links a user to a car for the period
between ``rent_started_at`` and ``rent_ended_at``.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RentCarRequest(BaseModel):
    """Body of ``POST /cars/{id}/rent``.

    ``rent_ended_at`` may be omitted or ``null``; the service then ends
    the rental a configurable number of days after it starts.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rent_started_at: datetime = Field(..., examples=["2023-05-27T05:11:01Z"])
    rent_ended_at: Optional[datetime] = Field(None, examples=[None])


class UserCarRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: int
    car_id: int
    rent_started_at: datetime
    rent_ended_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
