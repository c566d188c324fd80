"""
Car endpoints for API v1.

CRUD operations for cars plus ``POST /cars/{car_id}/rent``.  Handlers
delegate to ``CarService``.  Errors the HTTP contract renders inline
(422 on create/update, a clashing rental) are caught here; everything
else, failed lookups in particular, is left to the centralized
handlers in ``core.errors``.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from car_rental_api.app.api.deps import get_car_service
from car_rental_api.app.core.config import settings
from car_rental_api.app.core.errors import ConflictError, NotFoundError, ValidationError, error_body
from car_rental_api.app.core.security import get_current_user
from car_rental_api.app.schemas.car import (
    CarCreate,
    CarFilter,
    CarListMeta,
    CarListResponse,
    CarRead,
    CarSize,
    CarUpdate,
)
from car_rental_api.app.schemas.rental import RentCarRequest, UserCarRead
from car_rental_api.app.services.car_service import CarService

router = APIRouter()


@router.get("/", response_model=CarListResponse)
async def list_cars(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, alias="pageSize", ge=1, le=settings.max_page_size),
    size: Optional[CarSize] = Query(None),
    name: Optional[str] = Query(None),
    available_at: Optional[datetime] = Query(None, alias="availableAt"),
    service: CarService = Depends(get_car_service),
) -> CarListResponse:
    """Return a page of cars with pagination metadata.

    - **page**, **pageSize**: 1-based page number and page length.
    - **size**: only cars of this size.
    - **name**: only cars whose name contains this text.
    - **availableAt**: attach to each car the rental still running at this time.
    """
    car_filter = CarFilter(size=size, name=name, available_at=available_at)
    cars, count = await service.list_cars(car_filter, page=page, page_size=page_size)
    pagination = service.build_pagination(page, page_size, count)
    return CarListResponse(
        cars=[CarRead.model_validate(car) for car in cars],
        meta=CarListMeta(pagination=pagination),
    )


@router.get("/{car_id}", response_model=CarRead)
async def get_car(car_id: int, service: CarService = Depends(get_car_service)) -> CarRead:
    """Retrieve a single car.  Unknown ids produce a 404."""
    car = await service.get_car(car_id)
    return CarRead.model_validate(car)


@router.post("/", response_model=CarRead, status_code=status.HTTP_201_CREATED)
async def create_car(car_in: CarCreate, service: CarService = Depends(get_car_service)):
    """Create a car.

    Returns 422 with ``{"error": {"name", "message"}}`` when the car
    cannot be created, whether the input is invalid or the data store
    refuses it.
    """
    logger = logging.getLogger(__name__)
    try:
        car = await service.create_car(car_in)
    except Exception as exc:
        logger.warning("Creating car '%s' failed: %s", car_in.name, exc)
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=error_body(exc))
    return CarRead.model_validate(car)


@router.put("/{car_id}", response_model=CarRead)
async def update_car(car_id: int, updates: CarUpdate, service: CarService = Depends(get_car_service)):
    """Update an existing car.

    Partial updates are supported; unspecified fields remain unchanged.
    Unknown ids produce a 404, other failures a 422 error body.
    """
    logger = logging.getLogger(__name__)
    try:
        car = await service.update_car(car_id, updates)
    except NotFoundError:
        raise
    except Exception as exc:
        logger.warning("Updating car %s failed: %s", car_id, exc)
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=error_body(exc))
    return CarRead.model_validate(car)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_car(car_id: int, service: CarService = Depends(get_car_service)) -> Response:
    """Delete a car.  Responds 204 with an empty body."""
    await service.delete_car(car_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{car_id}/rent", response_model=UserCarRead, status_code=status.HTTP_201_CREATED)
async def rent_car(
    car_id: int,
    rental: RentCarRequest,
    current_user: dict = Depends(get_current_user),
    service: CarService = Depends(get_car_service),
):
    """Rent a car to the authenticated user.

    ``rentEndedAt`` defaults to one day after ``rentStartedAt``.  A car
    that is still rented at ``rentStartedAt`` yields a 422 error body.
    Failures to look the car up are not handled here.
    """
    try:
        user_car = await service.rent_car(
            car_id,
            int(current_user["user_id"]),
            rental.rent_started_at,
            rental.rent_ended_at,
        )
    except (ValidationError, ConflictError) as exc:
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))
    return UserCarRead.model_validate(user_car)
