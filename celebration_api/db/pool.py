"""
MySQL connection pool.

The pool is an SQLAlchemy AsyncEngine over aiomysql. It is created once in the
application lifespan, handed to the QueryExecutor and disposed on shutdown.
Nothing else in the code base talks to it directly.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from celebration_api.core.config import Settings, settings as default_settings
from celebration_api.core.logger import logger


def create_pool(settings: Settings = None) -> AsyncEngine:
    """
    Build the bounded connection pool.

    No overflow connections and no acquisition timeout: once DB_POOL_SIZE
    connections are checked out, callers wait in line until one is released.
    """
    settings = settings or default_settings

    engine = create_async_engine(
        settings.database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=0,
        pool_timeout=None,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args={"connect_timeout": settings.DB_CONNECT_TIMEOUT},
    )
    _setup_event_listeners(engine)

    logger.info(
        f"🗄️ MySQL pool configured for {settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME} "
        f"(size={settings.DB_POOL_SIZE})"
    )
    return engine


def _setup_event_listeners(engine: AsyncEngine) -> None:
    """Log pool level events. Listeners only log, the pool heals on next checkout."""
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        logger.debug("🔌 New MySQL connection opened")

    @event.listens_for(sync_engine, "invalidate")
    def on_invalidate(dbapi_connection, connection_record, exception):
        logger.warning(f"⚠️ MySQL connection invalidated: {exception}")

    @event.listens_for(sync_engine, "soft_invalidate")
    def on_soft_invalidate(dbapi_connection, connection_record, exception):
        logger.warning(f"⚠️ MySQL connection marked for recycle: {exception}")

    @event.listens_for(sync_engine, "close")
    def on_close(dbapi_connection, connection_record):
        logger.debug("🔌 MySQL connection closed")

    @event.listens_for(sync_engine, "handle_error")
    def on_error(context):
        if context.is_disconnect:
            logger.error(f"❌ MySQL connection lost: {context.original_exception}")


async def dispose_pool(engine: AsyncEngine) -> None:
    await engine.dispose()
    logger.info("🔒 MySQL pool closed")
