"""Pydantic schemas for request/response validation."""

from clinica.schemas.scheduling import (
    AgendaSnapshot,
    AvailabilityWindowIn,
    AvailableStartTimesRequest,
    BlackoutPeriodIn,
    ClinicHoursResponse,
    DayHoursResponse,
    ExistingAppointmentIn,
    StartTimesResponse,
    ValidateAppointmentRequest,
    ValidateAppointmentResponse,
)

__all__ = [
    "AgendaSnapshot",
    "AvailabilityWindowIn",
    "AvailableStartTimesRequest",
    "BlackoutPeriodIn",
    "ClinicHoursResponse",
    "DayHoursResponse",
    "ExistingAppointmentIn",
    "StartTimesResponse",
    "ValidateAppointmentRequest",
    "ValidateAppointmentResponse",
]
