from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends

from celebration_api.api.deps import get_booking_service
from celebration_api.core.exceptions import NotFoundError, operation_errors
from celebration_api.core.logger import logger
from celebration_api.models.booking import BookingCreated, BookingRecord, MessageResponse
from celebration_api.services.booking_service import BookingService
from celebration_api.services.validation import validate_create, validate_update

router = APIRouter()


# Declared before /bookings/{booking_id} so "filter" is not parsed as an id
@router.get("/bookings/filter", response_model=List[BookingRecord])
async def filter_bookings(
    date: Optional[str] = None,
    month: Optional[str] = None,
    year: Optional[str] = None,
    branch: Optional[str] = None,
    service: BookingService = Depends(get_booking_service),
):
    params = {"date": date, "month": month, "year": year, "branch": branch}
    logger.info(f"📥 GET /api/bookings/filter {params}")

    with operation_errors("Error fetching filtered bookings"):
        bookings = await service.filter_bookings(params)

    if not bookings:
        logger.info(f"ℹ️ No bookings found for filter: {params}")
        raise NotFoundError("No bookings found for the selected filters")
    return bookings


@router.get("/bookings", response_model=List[BookingRecord])
async def list_bookings(service: BookingService = Depends(get_booking_service)):
    logger.info("📥 GET /api/bookings")
    with operation_errors("Error fetching bookings"):
        return await service.list_bookings()


@router.get("/bookings/{booking_id}", response_model=BookingRecord)
async def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    logger.info(f"📥 GET /api/bookings/{booking_id}")
    with operation_errors("Error fetching booking"):
        return await service.get_booking(booking_id)


@router.post("/bookings", status_code=201, response_model=BookingCreated)
async def create_booking(
    body: Any = Body(None),
    service: BookingService = Depends(get_booking_service),
):
    logger.info(f"📥 POST /api/bookings: {body}")
    payload = validate_create(body)

    with operation_errors("Error creating booking"):
        booking_id = await service.create_booking(payload)
    return BookingCreated(bookingId=booking_id)


@router.put("/bookings/{booking_id}", response_model=MessageResponse)
async def update_booking(
    booking_id: int,
    body: Any = Body(None),
    service: BookingService = Depends(get_booking_service),
):
    logger.info(f"📥 PUT /api/bookings/{booking_id}: {body}")
    payload = validate_update(body)

    with operation_errors("Error updating booking"):
        await service.update_booking(booking_id, payload)
    return MessageResponse(message="Booking updated")


@router.delete("/bookings/{booking_id}", response_model=MessageResponse)
async def delete_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    logger.info(f"📥 DELETE /api/bookings/{booking_id}")
    with operation_errors("Error deleting booking"):
        await service.delete_booking(booking_id)
    return MessageResponse(message="Booking deleted")
