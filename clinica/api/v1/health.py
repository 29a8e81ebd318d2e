"""Health check endpoints."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from clinica.api.deps import Scheduling
from clinica.utils.time import WEEKDAY_NAMES

router = APIRouter()


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str


class ReadinessResponse(HealthResponse):
    """Readiness response with the clinic schedule in use."""

    session_minutes: int
    open_days: list[str]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Fails when the clinic hours file cannot be loaded",
)
async def readiness_check(service: Scheduling) -> ReadinessResponse:
    """Report readiness once the scheduling service is built.

    Resolving the service loads the clinic hours table, so a broken hours
    file surfaces here instead of on the first booking.
    """
    open_days = [
        name
        for weekday, name in enumerate(WEEKDAY_NAMES)
        if service.clinic_hours.for_weekday(weekday) is not None
    ]
    return ReadinessResponse(
        status="ok",
        session_minutes=service.session_minutes,
        open_days=open_days,
    )
