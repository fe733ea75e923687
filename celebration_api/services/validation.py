import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from celebration_api.core.exceptions import ValidationError
from celebration_api.models.booking import BOOKING_COLUMNS, BookingPayload

CONTACT_PATTERN = re.compile(r"^[0-9]{10}$")
DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
TIME_PATTERN = re.compile(r"^([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?$")

REQUIRED_FIELDS = BOOKING_COLUMNS


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float, Decimal)):
        return value == 0
    return False


def _check_required(body: dict) -> None:
    missing = [field for field in REQUIRED_FIELDS if _is_blank(body.get(field))]
    if missing:
        raise ValidationError(
            ValidationError.MISSING_FIELDS,
            f"All fields required (missing: {', '.join(missing)})",
            fields=missing,
        )


def _check_contact(contact: str) -> str:
    if not CONTACT_PATTERN.match(contact):
        raise ValidationError(ValidationError.INVALID_CONTACT, "Invalid contact number: Must be 10 digits")
    return contact


def _check_date(event_date: str) -> str:
    if not DATE_PATTERN.match(event_date):
        raise ValidationError(ValidationError.INVALID_DATE, "Invalid date format: Use YYYY-MM-DD")
    try:
        datetime.strptime(event_date, "%Y-%m-%d")
    except ValueError:
        raise ValidationError(ValidationError.INVALID_DATE, f"Invalid date: {event_date} is not a calendar date")
    return event_date


def normalize_time(event_time: str) -> str:
    """Accept HH:MM or HH:MM:SS and return HH:MM."""
    match = TIME_PATTERN.match(event_time)
    if not match:
        raise ValidationError(ValidationError.INVALID_TIME, "Invalid time format: Use HH:MM or HH:MM:SS")
    hours, minutes, seconds = match.groups()
    if int(hours) > 23 or int(minutes) > 59 or (seconds is not None and int(seconds) > 59):
        raise ValidationError(ValidationError.INVALID_TIME, "Invalid time format: Use HH:MM or HH:MM:SS")
    return f"{hours}:{minutes}"


def _check_amount(amount: Any) -> Decimal:
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(ValidationError.INVALID_AMOUNT, "Invalid amount: Must be a number")
    if not value.is_finite() or value < 0:
        raise ValidationError(ValidationError.INVALID_AMOUNT, "Invalid amount: Must be a number")
    return value


def _validate(body: Any) -> BookingPayload:
    if not isinstance(body, dict):
        body = {}

    _check_required(body)

    text = {field: str(body[field]).strip() for field in REQUIRED_FIELDS if field != "amount"}

    return BookingPayload(
        customerName=text["customerName"],
        contactNumber=_check_contact(text["contactNumber"]),
        eventDate=_check_date(text["eventDate"]),
        eventTime=normalize_time(text["eventTime"]),
        branch=text["branch"],
        selectedPackage=text["selectedPackage"],
        amount=_check_amount(body["amount"]),
        celebrationType=text["celebrationType"],
    )


def validate_create(body: Any) -> BookingPayload:
    """Validate a POST /api/bookings body."""
    return _validate(body)


def validate_update(body: Any) -> BookingPayload:
    """Validate a PUT /api/bookings/{id} body. Updates replace every field."""
    return _validate(body)
