from datetime import date
from typing import Any, List, Mapping

from celebration_api.core.exceptions import NotFoundError, QueryError
from celebration_api.core.logger import logger
from celebration_api.db.executor import QueryExecutor, TransactionHandle
from celebration_api.models.booking import BOOKING_COLUMNS, BookingPayload, BookingRecord
from celebration_api.services.filters import build_filter

SELECT_BOOKINGS = (
    "SELECT id, uniqueId, customerName, contactNumber, eventDate, eventTime, "
    "branch, selectedPackage, amount, celebrationType FROM bookings"
)

INSERT_BOOKING = (
    f"INSERT INTO bookings ({', '.join(BOOKING_COLUMNS)}) "
    f"VALUES ({', '.join(['%s'] * len(BOOKING_COLUMNS))})"
)

UPDATE_BOOKING = (
    f"UPDATE bookings SET {', '.join(f'{column} = %s' for column in BOOKING_COLUMNS)} "
    "WHERE id = %s"
)

STAMP_UNIQUE_ID = "UPDATE bookings SET uniqueId = %s WHERE id = %s"

DELETE_BOOKING = "DELETE FROM bookings WHERE id = %s"


def format_unique_id(booking_id: int) -> str:
    return f"{booking_id:05d}"


class BookingService:
    """Booking operations. All SQL goes through the injected QueryExecutor."""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    async def list_bookings(self) -> List[BookingRecord]:
        rows = await self.executor.execute(SELECT_BOOKINGS)
        logger.info(f"📚 Bookings fetched: {len(rows)}")
        return [BookingRecord.from_row(row) for row in rows]

    async def filter_bookings(self, params: Mapping[str, Any]) -> List[BookingRecord]:
        predicate, values = build_filter(params)
        statement = f"{SELECT_BOOKINGS} WHERE {predicate}"
        logger.info(f"🔎 Executing filter query: {predicate} params={values}")

        rows = await self.executor.execute(statement, values)
        logger.info(f"🔎 Filtered bookings fetched: {len(rows)}")
        return [BookingRecord.from_row(row) for row in rows]

    async def get_booking(self, booking_id: int) -> BookingRecord:
        rows = await self.executor.execute(f"{SELECT_BOOKINGS} WHERE id = %s", [booking_id])
        if not rows:
            raise NotFoundError("Booking not found")
        return BookingRecord.from_row(rows[0])

    async def bookings_for_date(self, event_date: date) -> List[BookingRecord]:
        rows = await self.executor.execute(
            f"{SELECT_BOOKINGS} WHERE eventDate = %s ORDER BY eventTime ASC",
            [event_date.isoformat()],
        )
        return [BookingRecord.from_row(row) for row in rows]

    async def create_booking(self, payload: BookingPayload) -> str:
        """
        Insert the booking and stamp its public uniqueId.

        Both statements run in one transaction so a booking never exists
        without its uniqueId.
        """
        async def insert_and_stamp(tx: TransactionHandle) -> str:
            inserted = await tx.execute(INSERT_BOOKING, payload.as_params())
            if not inserted.last_insert_id:
                raise QueryError("Insert did not return a booking id")

            unique_id = format_unique_id(inserted.last_insert_id)
            await tx.execute(STAMP_UNIQUE_ID, [unique_id, inserted.last_insert_id])
            return unique_id

        unique_id = await self.executor.transaction(insert_and_stamp)
        logger.info(f"✅ Booking created: {unique_id}")
        return unique_id

    async def update_booking(self, booking_id: int, payload: BookingPayload) -> None:
        result = await self.executor.execute(UPDATE_BOOKING, payload.as_params() + [booking_id])
        if not result or result.affected_rows == 0:
            raise NotFoundError("Booking not found")
        logger.info(f"✏️ Booking updated: {booking_id}")

    async def delete_booking(self, booking_id: int) -> None:
        result = await self.executor.execute(DELETE_BOOKING, [booking_id])
        if not result or result.affected_rows == 0:
            raise NotFoundError("Booking not found")
        logger.info(f"🗑️ Booking deleted: {booking_id}")
