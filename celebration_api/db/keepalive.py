import asyncio

from celebration_api.core.logger import logger
from celebration_api.db.executor import QueryExecutor


async def keep_pool_alive(executor: QueryExecutor, interval_seconds: float) -> None:
    """
    Ping the database forever so idle pooled connections are not dropped by
    the server or a proxy in between. Errors are logged and swallowed.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await executor.ping()
            logger.debug("💓 Pool pinged")
        except Exception as e:
            logger.error(f"❌ Ping error: {e}")


def start_keepalive(executor: QueryExecutor, interval_seconds: float) -> asyncio.Task:
    logger.info(f"💓 Keep-alive every {interval_seconds:.0f}s")
    return asyncio.create_task(keep_pool_alive(executor, interval_seconds), name="pool-keepalive")


async def stop_keepalive(task: asyncio.Task) -> None:
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
