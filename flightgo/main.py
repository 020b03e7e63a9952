import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api import routes
from .core.circuit_breaker import CircuitBreakerOpenError
from .core.config import Settings, get_settings
from .core.database import Database
from .core.health_checker import HealthChecker
from .core.logger_config import configure_logging
from .services.booking_service import BookingService
from .services.flight_service import FlightService
from .services.seat_allocation import SeatLockRegistry
from .services.user_service import UserService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    database = app.state.database
    database.connect()
    db = database.session()
    try:
        app.state.user_service.ensure_default_admin(db, settings)
    finally:
        db.close()
    logger.info("FlightGo API started (env=%s)", settings.ENV)
    try:
        yield
    finally:
        database.disconnect()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="FlightGo API",
        description="Flight search and ticket booking service",
        version=__version__,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(
        settings.DATABASE_URL,
        echo=settings.DATABASE_ECHO,
        failure_threshold=settings.DB_FAILURE_THRESHOLD,
        recovery_timeout=settings.DB_RECOVERY_TIMEOUT,
    )
    app.state.user_service = UserService(bcrypt_rounds=settings.BCRYPT_ROUNDS)
    app.state.flight_service = FlightService()
    app.state.booking_service = BookingService(
        locks=SeatLockRegistry(),
        enforce_capacity=settings.ENFORCE_SEAT_CAPACITY,
    )
    health_checker = HealthChecker("flightgo")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(routes.router)

    @app.exception_handler(CircuitBreakerOpenError)
    async def circuit_open_handler(request: Request, exc: CircuitBreakerOpenError):
        logger.error("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=503, content={"detail": "Service Unavailable"})

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Server Error"})

    @app.get("/health", tags=["health"])
    def health_check():
        report = health_checker.report(app.state.database)
        status_code = 200 if report["status"] == "healthy" else 503
        return JSONResponse(status_code=status_code, content=report)

    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "flightgo.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
