"""
Error taxonomy and centralized exception handlers.

Services raise subclasses of ``CarRentalError``; each carries the HTTP
status code it maps to.  Endpoints only catch the errors their
contract renders inline (for example a 422 on car creation).  All
other errors, lookup failures in particular, travel up to the handlers
installed by ``register_exception_handlers`` so that the response
format for them is decided in one place.
"""

import logging
from typing import Any, Dict, Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class CarRentalError(Exception):
    """Base class for errors raised by the car rental services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class ValidationError(CarRentalError):
    """Raised when input fails validation."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFoundError(CarRentalError):
    """Raised when a record id does not match any stored record."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CarRentalError):
    """Raised when a write clashes with existing state."""

    status_code = status.HTTP_409_CONFLICT


class CarAlreadyRentedError(ConflictError):
    """Raised when a car already has an active rental."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, car_id: int) -> None:
        self.car_id = car_id
        super().__init__(f"Car {car_id} is already rented")


def error_body(exc: Exception) -> Dict[str, Any]:
    """Render an exception as ``{"error": {"name": ..., "message": ...}}``."""
    return {"error": {"name": type(exc).__name__, "message": str(exc)}}


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> str:
    """Join pydantic error entries into ``"loc: msg; loc: msg"``."""
    parts = []
    for err in errors:
        location = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


async def car_rental_error_handler(request: Request, exc: CarRentalError) -> JSONResponse:
    logger = logging.getLogger(__name__)
    logger.info("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": {"name": "ValidationError", "message": format_validation_errors(exc.errors())}},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger = logging.getLogger(__name__)
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the centralized exception handlers on ``app``."""
    app.add_exception_handler(CarRentalError, car_rental_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
