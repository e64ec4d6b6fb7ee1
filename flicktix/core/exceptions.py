"""
Domain errors for the booking core.

Each error is an HTTPException so the service layer can raise it directly
and FastAPI renders it with the right status. Callers using the services
as a library can catch the concrete classes.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError


class BookingError(HTTPException):
    """Base class for every error the booking core raises on purpose."""

    status_code = status.HTTP_400_BAD_REQUEST
    retryable = False

    def __init__(self, detail: str, headers: dict | None = None):
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class InvalidInputError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class ShowtimeNotFoundError(NotFoundError):
    def __init__(self, showtime_id: int):
        self.showtime_id = showtime_id
        super().__init__(f"Showtime {showtime_id} not found")


class OverbookedError(BookingError):
    """Not enough seats left. Terminal: retrying cannot succeed without new capacity."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, showtime_id: int, requested: int, available: int):
        self.showtime_id = showtime_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough seats. Requested: {requested}, Available: {available}"
        )


class StoreUnavailableError(BookingError):
    """Transient infrastructure fault. Safe for the caller to retry with backoff."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, detail: str = "Booking store is temporarily unavailable", retry_after: int = 2):
        self.retry_after = retry_after
        super().__init__(detail, headers={"Retry-After": str(retry_after)})


# Connectivity faults, as opposed to constraint violations or programming errors
STORE_FAULTS = (OperationalError, InterfaceError, SQLAlchemyTimeoutError, OSError)


@contextmanager
def translate_store_errors(retry_after: int = 2) -> Iterator[None]:
    """Re-raise connectivity faults from the store as StoreUnavailableError."""
    try:
        yield
    except STORE_FAULTS as e:
        raise StoreUnavailableError(retry_after=retry_after) from e
