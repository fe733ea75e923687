from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator

# Column order shared by INSERT and UPDATE statements
BOOKING_COLUMNS = (
    "customerName",
    "contactNumber",
    "eventDate",
    "eventTime",
    "branch",
    "selectedPackage",
    "amount",
    "celebrationType",
)


class BookingPayload(BaseModel):
    """A create/update body that passed validation."""
    customerName: str
    contactNumber: str
    eventDate: str  # YYYY-MM-DD
    eventTime: str  # HH:MM
    branch: str
    selectedPackage: str
    amount: Decimal
    celebrationType: str

    def as_params(self) -> List[Any]:
        return [getattr(self, column) for column in BOOKING_COLUMNS]


class BookingRecord(BaseModel):
    """A booking row as returned to clients."""
    id: int
    uniqueId: Optional[str] = None
    customerName: str
    contactNumber: str
    eventDate: str  # DD-MM-YYYY
    eventTime: str  # HH:MM
    branch: str
    selectedPackage: str
    amount: float
    celebrationType: Optional[str] = None

    @field_validator("eventDate", mode="before")
    @classmethod
    def render_date(cls, value):
        if isinstance(value, (date, datetime)):
            return value.strftime("%d-%m-%Y")
        if isinstance(value, str) and len(value) == 10 and value[4] == "-":
            return datetime.strptime(value, "%Y-%m-%d").strftime("%d-%m-%Y")
        return value

    @field_validator("eventTime", mode="before")
    @classmethod
    def render_time(cls, value):
        # MySQL TIME columns come back from the driver as timedelta
        if isinstance(value, timedelta):
            minutes = int(value.total_seconds()) // 60
            return f"{minutes // 60:02d}:{minutes % 60:02d}"
        if isinstance(value, time):
            return value.strftime("%H:%M")
        if isinstance(value, str):
            return value[:5]
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def render_amount(cls, value):
        if isinstance(value, Decimal):
            return float(value)
        return value

    @classmethod
    def from_row(cls, row: dict) -> "BookingRecord":
        return cls(**row)


class BookingCreated(BaseModel):
    message: str = "Booking created"
    bookingId: str


class MessageResponse(BaseModel):
    message: str


class NotificationResponse(BaseModel):
    message: str
    bookings: List[BookingRecord]
