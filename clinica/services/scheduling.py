"""Scheduling service for appointment slot checks.

Binds the slot validator to the configured clinic hours, logs rejections,
and finds the start times that can still be booked on a given day.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from clinica.booking.hours import (
    DEFAULT_CLINIC_HOURS,
    ClinicHoursPolicy,
    generate_start_times,
    load_clinic_hours,
)
from clinica.booking.models import AvailabilityWindow, BlackoutPeriod, ExistingAppointment
from clinica.booking.policy import AppointmentValidation, validate_appointment
from clinica.core.config import Settings
from clinica.core.logging import get_logger
from clinica.utils.time import TimeOfDay, parse_time

logger = get_logger(__name__)


class SchedulingService:
    """Service for validating appointment slots against clinic rules."""

    def __init__(
        self,
        clinic_hours: ClinicHoursPolicy = DEFAULT_CLINIC_HOURS,
        session_minutes: int = 30,
        slot_interval_minutes: int = 30,
    ):
        self.clinic_hours = clinic_hours
        self.session_minutes = session_minutes
        self.slot_interval_minutes = slot_interval_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "SchedulingService":
        """Create a service using the clinic hours file from settings, if any."""
        if settings.clinic_hours_file:
            clinic_hours = load_clinic_hours(
                settings.clinic_hours_file,
                session_minutes=settings.session_duration_minutes,
            )
            logger.info(f"Loaded clinic hours from {settings.clinic_hours_file}")
        else:
            clinic_hours = DEFAULT_CLINIC_HOURS

        return cls(
            clinic_hours=clinic_hours,
            session_minutes=settings.session_duration_minutes,
            slot_interval_minutes=settings.slot_interval_minutes,
        )

    def validate(
        self,
        candidate_date: date,
        start_time: str | TimeOfDay,
        end_time: str | TimeOfDay,
        psychologist_id: int,
        availability: Iterable[AvailabilityWindow],
        blackouts: Iterable[BlackoutPeriod] = (),
        appointments: Iterable[ExistingAppointment] = (),
        editing_appointment_id: Optional[int] = None,
    ) -> AppointmentValidation:
        """Validate a proposed slot and log the outcome."""
        result = validate_appointment(
            candidate_date,
            start_time,
            end_time,
            psychologist_id,
            availability,
            blackouts,
            appointments,
            editing_appointment_id=editing_appointment_id,
            clinic_hours=self.clinic_hours,
        )

        if result.valid:
            logger.debug(
                f"Slot accepted: psychologist={psychologist_id} "
                f"date={candidate_date} {start_time}-{end_time}"
            )
        else:
            logger.info(
                f"Slot rejected: psychologist={psychologist_id} "
                f"date={candidate_date} {start_time}-{end_time} "
                f"reason={result.rejection.value}",
                extra={
                    "psychologist_id": psychologist_id,
                    "candidate_date": candidate_date,
                    "rejection": result.rejection.value,
                },
            )

        return result

    async def validate_async(
        self,
        candidate_date: date,
        start_time: str | TimeOfDay,
        end_time: str | TimeOfDay,
        psychologist_id: int,
        availability: Iterable[AvailabilityWindow],
        blackouts: Iterable[BlackoutPeriod] = (),
        appointments: Iterable[ExistingAppointment] = (),
        editing_appointment_id: Optional[int] = None,
    ) -> AppointmentValidation:
        """Async wrapper for callers with an async signature.

        Performs no asynchronous work.
        """
        return self.validate(
            candidate_date,
            start_time,
            end_time,
            psychologist_id,
            availability,
            blackouts,
            appointments,
            editing_appointment_id=editing_appointment_id,
        )

    def start_times(self, day: date) -> list[TimeOfDay]:
        """Start times within clinic hours for the day, ignoring agendas."""
        return generate_start_times(
            self.clinic_hours, day, interval_minutes=self.slot_interval_minutes
        )

    def available_start_times(
        self,
        day: date,
        psychologist_id: int,
        availability: Sequence[AvailabilityWindow],
        blackouts: Sequence[BlackoutPeriod] = (),
        appointments: Sequence[ExistingAppointment] = (),
        duration_minutes: Optional[int] = None,
        editing_appointment_id: Optional[int] = None,
    ) -> list[TimeOfDay]:
        """Get the start times a session can still be booked at.

        Each start on the clinic grid is run through the full validation
        pipeline with a session of ``duration_minutes`` (defaults to the
        configured session length).
        """
        duration = duration_minutes or self.session_minutes
        available = []

        for start in self.start_times(day):
            end_minutes = start.minutes + duration
            if end_minutes >= 24 * 60:
                break

            result = validate_appointment(
                day,
                start,
                TimeOfDay(end_minutes),
                psychologist_id,
                availability,
                blackouts,
                appointments,
                editing_appointment_id=editing_appointment_id,
                clinic_hours=self.clinic_hours,
            )
            if result.valid:
                available.append(start)

        logger.debug(
            f"{len(available)} start times available for psychologist="
            f"{psychologist_id} on {day}"
        )

        return available

    def session_end(self, start_time: str | TimeOfDay) -> TimeOfDay:
        """Default end time for a session starting at ``start_time``."""
        return parse_time(start_time).plus_minutes(self.session_minutes)
