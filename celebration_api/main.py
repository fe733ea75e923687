import asyncio
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from celebration_api.api import bookings, notifications
from celebration_api.api.deps import get_executor
from celebration_api.core.config import settings
from celebration_api.core.exceptions import BookingAPIError
from celebration_api.core.logger import logger, setup_logging
from celebration_api.db.executor import QueryExecutor
from celebration_api.db.keepalive import start_keepalive, stop_keepalive
from celebration_api.db.pool import create_pool, dispose_pool

setup_logging()

STARTED_AT = time.monotonic()


def uptime() -> float:
    return round(time.monotonic() - STARTED_AT, 3)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Celebration House booking API")
    engine = create_pool(settings)
    executor = QueryExecutor(
        engine,
        retries=settings.DB_QUERY_RETRIES,
        backoff_seconds=settings.DB_RETRY_BACKOFF_SECONDS,
        empty_on_exhaustion=settings.DB_EMPTY_ON_RETRY_EXHAUSTION,
    )
    app.state.executor = executor

    try:
        await executor.ping()
        logger.info("✅ MySQL connected successfully")
    except Exception as e:
        # Keep serving; queries fail until the database comes back
        logger.error(f"❌ MySQL connection error, running degraded: {e}")

    keepalive = start_keepalive(executor, settings.KEEPALIVE_INTERVAL_SECONDS)

    yield

    # Shutdown (uvicorn has already stopped accepting connections)
    logger.info("🛑 Shutting down backend")

    async def close_resources():
        await stop_keepalive(keepalive)
        await dispose_pool(engine)

    try:
        await asyncio.wait_for(close_resources(), timeout=settings.SHUTDOWN_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.critical(f"⏱️ Shutdown stalled for {settings.SHUTDOWN_TIMEOUT_SECONDS}s, forcing exit")
        os._exit(1)


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingAPIError)
async def booking_error_handler(request: Request, exc: BookingAPIError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        logger.error(f"❌ Invalid route accessed: {request.method} {request.url.path}")
        return JSONResponse(
            status_code=404,
            content={"error": f"Route not found: {request.method} {request.url.path}"}
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.warning(f"⚠️ Invalid request {request.method} {request.url.path}: {problems}")
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("🔥 UNHANDLED ERROR on {} {}: {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error"}
    )


# Include routers
app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["Bookings"])
app.include_router(notifications.router, prefix=settings.API_PREFIX, tags=["Notifications"])


@app.get("/health")
async def health_check(executor: QueryExecutor = Depends(get_executor)):
    try:
        await executor.ping()
    except Exception as e:
        logger.error(f"❌ Health check failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"status": "ERROR", "uptime": uptime(), "error": str(e)}
        )
    return {"status": "OK", "uptime": uptime(), "timestamp": now_iso()}


@app.get("/api/test")
async def smoke_test():
    logger.info("🧪 Test route accessed")
    return {"message": "Server running", "timestamp": now_iso()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "celebration_api.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        timeout_graceful_shutdown=int(settings.SHUTDOWN_TIMEOUT_SECONDS),
    )
