"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient

from clinica.api.deps import get_scheduling_service
from clinica.booking.hours import DEFAULT_CLINIC_HOURS, ClinicHoursPolicy
from clinica.booking.models import AvailabilityWindow, ExistingAppointment
from clinica.main import app
from clinica.services.scheduling import SchedulingService

# A Tuesday
TUESDAY = date(2024, 3, 5)


@pytest.fixture
def clinic_hours() -> ClinicHoursPolicy:
    """Default clinic hours table."""
    return DEFAULT_CLINIC_HOURS


@pytest.fixture
def full_week_availability() -> list[AvailabilityWindow]:
    """Psychologist available all clinic hours, Monday to Saturday."""
    windows = [
        AvailabilityWindow.from_strings(weekday, "08:00", "21:00")
        for weekday in range(1, 6)
    ]
    windows.append(AvailabilityWindow.from_strings(6, "08:00", "15:00"))
    return windows


@pytest.fixture
def tuesday_morning() -> list[AvailabilityWindow]:
    """Psychologist available Tuesday 08:00-12:00 only."""
    return [AvailabilityWindow.from_strings(2, "08:00", "12:00")]


@pytest.fixture
def split_tuesday() -> list[AvailabilityWindow]:
    """Tuesday morning and afternoon windows that touch at 12:00."""
    return [
        AvailabilityWindow.from_strings(2, "08:00", "12:00"),
        AvailabilityWindow.from_strings(2, "12:00", "18:00"),
    ]


@pytest.fixture
def confirmed_afternoon() -> ExistingAppointment:
    """Confirmed Tuesday appointment 14:00-15:00."""
    return ExistingAppointment.from_strings(
        id=101,
        date=TUESDAY,
        start_time="14:00",
        end_time="15:00",
        status="confirmado",
    )


@pytest.fixture
def scheduling_service() -> SchedulingService:
    """Scheduling service with default clinic hours."""
    return SchedulingService()


@pytest.fixture
def client(scheduling_service: SchedulingService) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with overridden dependencies."""
    app.dependency_overrides[get_scheduling_service] = lambda: scheduling_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
