from fastapi import Depends, Request

from celebration_api.db.executor import QueryExecutor
from celebration_api.services.booking_service import BookingService


def get_executor(request: Request) -> QueryExecutor:
    return request.app.state.executor


def get_booking_service(executor: QueryExecutor = Depends(get_executor)) -> BookingService:
    return BookingService(executor)
