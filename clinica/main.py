"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clinica.api.v1.router import api_router
from clinica.booking.hours import ClinicHoursConfigError
from clinica.core.config import settings
from clinica.core.logging import get_logger, setup_logging

SERVICE_NAME = "Clínica Agenda API"
VERSION = "0.1.0"

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log startup and shutdown."""
    logger.info(
        f"Starting {SERVICE_NAME} (env={settings.env}, clinic={settings.clinic_name}, "
        f"hours={settings.clinic_hours_file or 'default'})"
    )

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")


app = FastAPI(
    title=SERVICE_NAME,
    description="Appointment slot validation for psychology clinics",
    version=VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
    openapi_url="/openapi.json" if settings.is_dev else None,
    lifespan=lifespan,
)

# Booking form dev servers
if settings.is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(ClinicHoursConfigError)
async def clinic_hours_error_handler(
    request: Request, exc: ClinicHoursConfigError
) -> JSONResponse:
    """A broken clinic hours file makes the service unavailable, not the request invalid."""
    logger.error(f"Clinic hours configuration error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Clinic hours are misconfigured"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    detail = "Internal server error" if settings.is_prod else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": detail},
    )


app.include_router(api_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint with service info."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "clinic": settings.clinic_name,
        "docs": "/docs" if settings.is_dev else "Disabled in production",
    }
