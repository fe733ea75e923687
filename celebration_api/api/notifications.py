from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends

from celebration_api.api.deps import get_booking_service
from celebration_api.core.config import settings
from celebration_api.core.exceptions import AuthorizationError, operation_errors
from celebration_api.core.logger import logger
from celebration_api.models.booking import NotificationResponse
from celebration_api.services.booking_service import BookingService

router = APIRouter()


def tomorrow(tz_name: str = None) -> date:
    tz = ZoneInfo(tz_name or settings.TIMEZONE)
    return (datetime.now(tz) + timedelta(days=1)).date()


@router.get("/notifications", response_model=NotificationResponse)
async def tomorrow_notifications(
    admin: Optional[str] = None,
    service: BookingService = Depends(get_booking_service),
):
    """Bookings scheduled for tomorrow, for the admin's reminder round."""
    logger.info(f"📥 GET /api/notifications admin={admin}")
    if admin != "true":
        logger.warning("⛔ Unauthorized access to notifications")
        raise AuthorizationError("Access denied: Admin only")

    day = tomorrow()
    with operation_errors("Error fetching notifications"):
        bookings = await service.bookings_for_date(day)

    logger.info(f"🔔 Notifications fetched: {len(bookings)}")
    return NotificationResponse(
        message=f"Bookings for tomorrow ({day.strftime('%d-%m-%Y')})",
        bookings=bookings,
    )
