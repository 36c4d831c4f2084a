# booking_core/core/exceptions.py
"""
Domain exceptions for the availability and booking core.

Each exception knows how it should be surfaced over HTTP so the API layer
can translate it without inspecting messages.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class BookingCoreError(Exception):
    """Base exception for all booking core errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable: bool = False

    def __init__(
            self,
            message: str,
            code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class InvalidTimezone(BookingCoreError):
    """Unrecognized IANA timezone identifier."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, timezone_name: str) -> None:
        super().__init__(
            f"Unknown timezone: {timezone_name!r}",
            details={"timezone": timezone_name},
        )


class InvalidServiceConfiguration(BookingCoreError):
    """Non-positive duration, negative buffers or a bad slot step."""

    status_code = HTTP_422_UNPROCESSABLE


class SlotNoLongerAvailable(BookingCoreError):
    """The requested slot was taken or closed before the booking committed."""

    status_code = status.HTTP_409_CONFLICT


class BookingTimedOut(BookingCoreError):
    """The booking transaction did not finish in time and was rolled back."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"Retry-After": "1"}
        return exc


class NotFoundError(BookingCoreError):
    """A referenced business, service, employee or booking does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidBookingRequest(BookingCoreError):
    """The request is well-formed but violates a booking rule."""

    status_code = status.HTTP_400_BAD_REQUEST
