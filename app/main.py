"""Resort Front Desk — FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api.v1.booking_import import router as booking_import_router
from app.api.v1.bookings import router as bookings_router
from app.api.v1.rooms import router as rooms_router
from app.api.v1.transactions import router as transactions_router
from app.auth.rate_limit import RateLimiter
from app.config import settings
from app.repositories import build_storage

# Configure root logger so all app.* loggers output to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    await app.state.storage.startup()
    yield
    await app.state.storage.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Front-desk bookings, availability and billing for a resort.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Chosen once here; never inferred from the request environment.
app.state.storage = build_storage(settings)
app.state.rate_limiter = RateLimiter(
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key", "X-API-Secret"],
)

# Routers (import before bookings so /import is not read as a booking id)
app.include_router(booking_import_router)
app.include_router(bookings_router)
app.include_router(rooms_router)
app.include_router(transactions_router)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "error": "Storage unavailable"},
    )


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name, "storage": settings.storage_backend}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
