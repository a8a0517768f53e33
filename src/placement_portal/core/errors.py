"""
Service Error Taxonomy

Every request-path failure is raised as a ServiceError subclass carrying a
stable error code and the HTTP status the routers translate it to.

Ineligibility is deliberately absent: it is a normal outcome reported by
the application service, not an exception.
"""

from collections.abc import Iterable

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceError):
    """Malformed input, rejected before touching storage."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="VALIDATION_ERROR", status_code=400)


class NotFoundError(ServiceError):
    """A referenced drive, student, user or application does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class ConflictError(ServiceError):
    """The request conflicts with current state or a constraint."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class InvalidStatusTransitionError(ConflictError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current_status: str, new_status: str, allowed: Iterable[str] = ()):
        self.current_status = current_status
        self.new_status = new_status
        super().__init__(
            message=(
                f"Invalid status transition: {current_status} -> {new_status}. "
                f"Valid transitions: {sorted(allowed)}"
            ),
            error_code="INVALID_STATUS_TRANSITION",
        )


class TransientStorageError(ServiceError):
    """Storage timed out or the connection was lost. Safe to retry."""

    def __init__(self, message: str = "Storage is temporarily unavailable. Please retry."):
        super().__init__(message=message, error_code="STORAGE_UNAVAILABLE", status_code=503)


class FatalConfigError(RuntimeError):
    """Unrecoverable start-up condition. The process must not serve traffic."""


def translate_storage_error(exc: Exception) -> ServiceError:
    """
    Map a low-level storage exception onto the service taxonomy.

    Args:
        exc: Exception raised by SQLAlchemy, the driver or asyncio

    Returns:
        ConflictError for constraint violations, TransientStorageError otherwise
    """
    if isinstance(exc, IntegrityError):
        return ConflictError("The change violates a data constraint.", "CONSTRAINT_VIOLATION")
    if isinstance(exc, (OperationalError, InterfaceError, TimeoutError)):
        return TransientStorageError()
    return TransientStorageError("Storage operation failed. Please retry.")


# Exceptions the services catch around storage calls
STORAGE_ERRORS = (SQLAlchemyError, TimeoutError)


def raise_http_error(e: ServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def unexpected_error(e: Exception) -> HTTPException:
    """
    HTTP error for an exception that escaped the service layer.

    Storage failures map onto the taxonomy (503 or 409); anything else is a
    generic 500 whose details stay in the log.
    """
    if isinstance(e, STORAGE_ERRORS):
        translated = translate_storage_error(e)
        return HTTPException(
            status_code=translated.status_code,
            detail={"error": translated.error_code, "message": translated.message},
        )
    return HTTPException(
        status_code=500,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
