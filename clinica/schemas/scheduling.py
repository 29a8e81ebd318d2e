"""Pydantic schemas for scheduling endpoints.

Requests carry the snapshot the caller loaded from storage; the service
never reads the database itself.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from clinica.booking.models import (
    AppointmentStatus,
    AvailabilityWindow,
    BlackoutPeriod,
    ExistingAppointment,
)
from clinica.booking.policy import Rejection
from clinica.utils.time import parse_time

# "HH:MM", optionally with seconds as returned by Postgres time columns
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


def _time_field(description: str = "HH:MM format", **kwargs):
    return Field(..., pattern=TIME_PATTERN, description=description, **kwargs)


class AvailabilityWindowIn(BaseModel):
    """Recurring weekly availability window."""

    weekday: int = Field(..., ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start_time: str = _time_field()
    end_time: str = _time_field()
    is_active: bool = True
    psychologist_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_range(self) -> "AvailabilityWindowIn":
        """Window must start before it ends."""
        if parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError("start_time must be before end_time")
        return self

    def to_domain(self) -> AvailabilityWindow:
        return AvailabilityWindow.from_strings(
            weekday=self.weekday,
            start_time=self.start_time,
            end_time=self.end_time,
            is_active=self.is_active,
            psychologist_id=self.psychologist_id,
        )


class BlackoutPeriodIn(BaseModel):
    """Blackout period (vacation, holiday, leave)."""

    start_date: date
    end_date: date
    is_approved: bool = False
    reason: Optional[str] = Field(None, max_length=500)
    psychologist_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_range(self) -> "BlackoutPeriodIn":
        """Period must not end before it starts."""
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self

    def to_domain(self) -> BlackoutPeriod:
        return BlackoutPeriod(
            start_date=self.start_date,
            end_date=self.end_date,
            is_approved=self.is_approved,
            reason=self.reason,
            psychologist_id=self.psychologist_id,
        )


class ExistingAppointmentIn(BaseModel):
    """Appointment already on the agenda."""

    id: int
    date: date
    start_time: str = _time_field()
    end_time: str = _time_field()
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    psychologist_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_range(self) -> "ExistingAppointmentIn":
        """Appointment must start before it ends."""
        if parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError("start_time must be before end_time")
        return self

    def to_domain(self) -> ExistingAppointment:
        return ExistingAppointment.from_strings(
            id=self.id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status.value,
            psychologist_id=self.psychologist_id,
        )


class AgendaSnapshot(BaseModel):
    """Psychologist agenda data loaded by the caller."""

    psychologist_id: int
    availability: list[AvailabilityWindowIn] = Field(default_factory=list)
    blackouts: list[BlackoutPeriodIn] = Field(default_factory=list)
    appointments: list[ExistingAppointmentIn] = Field(default_factory=list)

    def availability_domain(self) -> list[AvailabilityWindow]:
        return [w.to_domain() for w in self.availability]

    def blackouts_domain(self) -> list[BlackoutPeriod]:
        return [b.to_domain() for b in self.blackouts]

    def appointments_domain(self) -> list[ExistingAppointment]:
        return [a.to_domain() for a in self.appointments]


class ValidateAppointmentRequest(AgendaSnapshot):
    """Request to validate an appointment slot.

    When ``end_time`` is omitted the configured session length is used.
    """

    date: date
    start_time: str = _time_field()
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN, description="HH:MM format")
    appointment_id: Optional[int] = Field(
        None, description="Appointment being edited, excluded from conflicts"
    )

    @model_validator(mode="after")
    def validate_range(self) -> "ValidateAppointmentRequest":
        """End time, when given, must be after the start time."""
        if self.end_time is not None and parse_time(self.end_time) <= parse_time(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class ValidateAppointmentResponse(BaseModel):
    """Slot validation outcome."""

    valid: bool
    message: str
    rejection: Optional[Rejection] = None


class AvailableStartTimesRequest(AgendaSnapshot):
    """Request for bookable start times on a date."""

    date: date
    duration_minutes: Optional[int] = Field(None, gt=0, le=720)
    appointment_id: Optional[int] = None


class StartTimesResponse(BaseModel):
    """Start times for a date, as "HH:MM" strings."""

    date: date
    start_times: list[str]


class DayHoursResponse(BaseModel):
    """Clinic hours for one day bucket."""

    opening: str
    closing: str
    last_start: str


class ClinicHoursResponse(BaseModel):
    """Clinic hours table; null entries mean the clinic is closed."""

    weekdays: Optional[DayHoursResponse]
    saturday: Optional[DayHoursResponse]
    sunday: Optional[DayHoursResponse]
