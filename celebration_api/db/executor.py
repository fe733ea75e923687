"""
Resilient query execution.

Every database call in the service goes through QueryExecutor.execute (or
QueryExecutor.transaction). A call borrows one pooled connection per attempt and
retries only when the driver reports that the connection itself went away.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, NamedTuple, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from celebration_api.core.exceptions import BookingAPIError, QueryError, ServiceUnavailableError
from celebration_api.core.logger import logger

TRANSIENT_ERROR_MARKERS = (
    "closed state",
    "server has gone away",
    "lost connection",
    "connection reset",
    "connection was killed",
    "broken pipe",
)


class QueryResult(NamedTuple):
    affected_rows: int
    last_insert_id: Optional[int]


Rows = List[Dict[str, Any]]
ExecuteResult = Union[Rows, QueryResult]


def is_transient_error(exc: BaseException) -> bool:
    """True when the error means the connection was closed, reset or lost."""
    if getattr(exc, "connection_invalidated", False):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_ERROR_MARKERS)


def driver_message(exc: BaseException) -> str:
    # SQLAlchemy wraps the DBAPI error; the driver text is the useful part
    return str(getattr(exc, "orig", None) or exc)


def is_row_returning(statement: str) -> bool:
    return "select" in statement.lower()


async def _run_statement(conn: AsyncConnection, statement: str, parameters: Sequence[Any]) -> ExecuteResult:
    result = await conn.exec_driver_sql(statement, tuple(parameters) if parameters else None)
    if result.returns_rows:
        return [dict(row) for row in result.mappings().all()]
    return QueryResult(result.rowcount, result.lastrowid)


class TransactionHandle:
    """Passed to transaction callbacks; statements share one connection."""

    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def execute(self, statement: str, parameters: Optional[Sequence[Any]] = None) -> ExecuteResult:
        return await _run_statement(self._conn, statement, parameters or ())


class QueryExecutor:
    def __init__(
        self,
        engine: AsyncEngine,
        retries: int = 3,
        backoff_seconds: float = 1.0,
        empty_on_exhaustion: bool = False,
    ):
        self.engine = engine
        self.retries = retries
        self.backoff_seconds = backoff_seconds
        self.empty_on_exhaustion = empty_on_exhaustion

    async def execute(self, statement: str, parameters: Optional[Sequence[Any]] = None) -> ExecuteResult:
        """
        Run a single parameterized statement.

        Returns a list of row dicts for SELECTs and a QueryResult for anything
        else. Parameters are positional and bound by the driver.
        """
        parameters = tuple(parameters or ())

        async def work(conn: AsyncConnection) -> ExecuteResult:
            result = await _run_statement(conn, statement, parameters)
            if isinstance(result, QueryResult):
                await conn.commit()
            return result

        return await self._with_retry(work, statement)

    async def transaction(self, work: Callable[[TransactionHandle], Awaitable[Any]]) -> Any:
        """
        Run `work` inside one transaction on one connection.

        A transient failure rolls the whole transaction back and runs `work`
        again from the start.
        """
        async def run(conn: AsyncConnection) -> Any:
            async with conn.begin():
                return await work(TransactionHandle(conn))

        return await self._with_retry(run, None)

    async def ping(self) -> bool:
        await self.execute("SELECT 1")
        return True

    async def _with_retry(self, work: Callable[[AsyncConnection], Awaitable[Any]], statement: Optional[str]) -> Any:
        retries = self.retries
        while True:
            try:
                async with self.engine.connect() as conn:
                    return await work(conn)
            except BookingAPIError:
                raise
            except Exception as exc:
                logger.error(f"❌ Query error: {driver_message(exc)}")

                if not is_transient_error(exc):
                    raise QueryError(driver_message(exc), original=exc) from exc

                if retries > 1:
                    retries -= 1
                    logger.warning(
                        f"🔁 Connection closed, retrying in {self.backoff_seconds}s ({retries} attempt(s) left)"
                    )
                    await asyncio.sleep(self.backoff_seconds)
                    continue

                return self._exhausted(statement, exc)

    def _exhausted(self, statement: Optional[str], exc: Exception) -> ExecuteResult:
        if self.empty_on_exhaustion and statement is not None:
            logger.warning("⚠️ Retries exhausted, returning an empty result")
            return [] if is_row_returning(statement) else QueryResult(0, None)

        raise ServiceUnavailableError(
            f"Database unavailable after {self.retries} attempts: {driver_message(exc)}",
            original=exc,
        ) from exc
