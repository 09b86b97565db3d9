"""
Shared exception classes and error handling utilities for Patient Service API.

This module provides:
- Custom exception hierarchy for domain-specific errors
- ErrorResponse construction shared by routers and handlers
- Exception handlers for FastAPI integration

Every failure leaving the API is rendered as an ErrorResponse body
({timestamp, statusCode, message, detail}) whose statusCode equals the
HTTP status of the response.

Usage:
    from core.exceptions import PatientNotFoundError, error_response

    # In service layer - raise domain exceptions
    raise PatientNotFoundError(patient_id=42)

    # In a router - build an explicit failure response
    return error_response(404, "Patient not found", str(exc))

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.datetime_utils import utc_now
from schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class PatientServiceError(Exception):
    """
    Base exception for all Patient Service domain errors.

    Subclasses set a default status code and a short default detail that
    doubles as the ErrorResponse message when the error reaches a handler.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context for logging.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    @property
    def message(self) -> str:
        """Short, fixed phrase for the error class."""
        return self.__class__.detail

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        result = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# PATIENT EXCEPTIONS
# =============================================================================

class PatientNotFoundError(PatientServiceError):
    """Raised when no patient exists with the requested id."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Patient not found"

    def __init__(self, patient_id: Optional[int] = None, **kwargs: Any):
        detail = f"Patient not found with id: {patient_id}" if patient_id is not None else self.detail
        super().__init__(detail=detail, patient_id=patient_id, **kwargs)


class InvalidPatientDataError(PatientServiceError):
    """Raised when a patient payload breaks a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid patient data"


class SlotAlreadyBookedError(PatientServiceError):
    """Raised when a slot key is already held by another patient."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Slot already booked"

    def __init__(self, slot_id: Optional[int] = None, **kwargs: Any):
        detail = f"Slot {slot_id} is already booked by another patient" if slot_id is not None else self.detail
        super().__init__(detail=detail, slot_id=slot_id, **kwargs)


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(PatientServiceError):
    """Raised when a database operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


# =============================================================================
# ERROR RESPONSES
# =============================================================================

def error_response(
    status_code: int,
    message: str,
    detail: str = "",
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """
    Build a JSON failure response carrying a fresh ErrorResponse body.

    Args:
        status_code: HTTP status; also written to the body's statusCode.
        message: Short description of what failed.
        detail: Underlying error text, empty when there is none.
        headers: Optional extra response headers.
    """
    body = ErrorResponse(
        timestamp=utc_now(),
        status_code=status_code,
        message=message,
        detail=detail,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
        headers=dict(headers) if headers else None,
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def patient_service_exception_handler(
    request: Request,
    exc: PatientServiceError
) -> JSONResponse:
    """Render domain errors that escaped a route."""
    logger.warning(
        f"PatientServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return error_response(exc.status_code, exc.message, exc.detail)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Render request binding failures (bad JSON, non-numeric ids, missing
    query parameters) as 400.
    """
    detail = _format_validation_errors(exc)
    logger.warning(
        f"Request validation failed: {detail}",
        extra={"path": request.url.path, "method": request.method}
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", detail)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method)."""
    try:
        message = HTTPStatus(exc.status_code).phrase
    except ValueError:
        message = "HTTP error"
    return error_response(
        exc.status_code,
        message,
        str(exc.detail) if exc.detail is not None else "",
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions with a generic error response.

    Logs the full exception for debugging.
    """
    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method
        }
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        str(exc),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.

    Example:
        app = FastAPI()
        setup_exception_handlers(app)
    """
    app.add_exception_handler(PatientServiceError, patient_service_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
