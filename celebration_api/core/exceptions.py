from contextlib import contextmanager
from typing import Optional


class BookingAPIError(Exception):
    """Base error. Every subclass maps onto one HTTP status code."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingAPIError):
    """Client input is missing or malformed. Raised before any DB access."""

    status_code = 400

    MISSING_FIELDS = "MissingFields"
    INVALID_CONTACT = "InvalidContact"
    INVALID_DATE = "InvalidDate"
    INVALID_TIME = "InvalidTime"
    INVALID_MONTH_YEAR = "InvalidMonthYear"
    INVALID_AMOUNT = "InvalidAmount"

    def __init__(self, kind: str, message: str, fields: Optional[list] = None):
        super().__init__(message)
        self.kind = kind
        self.fields = fields or []


class NotFoundError(BookingAPIError):
    status_code = 404


class AuthorizationError(BookingAPIError):
    status_code = 403


class QueryError(BookingAPIError):
    """Database failure that is not retried, message carries the driver text."""

    status_code = 500

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ServiceUnavailableError(QueryError):
    """Connection kept failing until the retry budget ran out."""

    status_code = 503


@contextmanager
def operation_errors(label: str):
    """Prefix database errors with the operation that hit them."""
    try:
        yield
    except QueryError as exc:
        raise type(exc)(f"{label}: {exc.message}", original=exc.original) from exc
