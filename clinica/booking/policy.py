"""Appointment slot validation.

Decides whether a proposed appointment may be booked, given the clinic's
opening hours, the psychologist's weekly availability, approved time off and
the appointments already on the agenda.

Rules run in a fixed order and the first failure wins:

1. Clinic hours
2. Psychologist availability
3. Blackout periods
4. Conflicts with existing appointments

Clinic-wide limits come before psychologist-specific ones, and double-booking
is only reported for a slot that is otherwise bookable. Every rule returns an
``AppointmentValidation``; nothing here raises for a rejected slot.

The result is a pre-check over caller-supplied snapshots. Bookings committed
after the snapshot was read are not seen; storage must still enforce
uniqueness at write time.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from clinica.booking.hours import DEFAULT_CLINIC_HOURS, ClinicHoursPolicy, closed_day_message
from clinica.booking.models import (
    AvailabilityWindow,
    BlackoutPeriod,
    CandidateAppointment,
    ExistingAppointment,
)
from clinica.utils.time import TimeOfDay, as_date, clinic_weekday, parse_time, weekday_name


class Rejection(str, Enum):
    """Reason an appointment slot was rejected."""

    CLINIC_CLOSED = "clinic_closed"
    BEFORE_OPENING = "before_opening"
    AFTER_LAST_BOOKABLE_START = "after_last_bookable_start"
    AFTER_CLOSING = "after_closing"
    NO_AVAILABILITY_THIS_WEEKDAY = "no_availability_this_weekday"
    OUTSIDE_AVAILABILITY_WINDOW = "outside_availability_window"
    BLACKOUT_PERIOD = "blackout_period"
    CONFLICTING_APPOINTMENT = "conflicting_appointment"


@dataclass(frozen=True)
class AppointmentValidation:
    """Outcome of validating an appointment slot.

    Attributes:
        valid: Whether the slot may be booked
        message: Human-readable explanation, shown to the user as is
        rejection: Which rule failed, None when valid
    """

    valid: bool
    message: str
    rejection: Optional[Rejection] = None

    @classmethod
    def accept(cls, message: str) -> "AppointmentValidation":
        return cls(valid=True, message=message)

    @classmethod
    def reject(cls, rejection: Rejection, message: str) -> "AppointmentValidation":
        return cls(valid=False, message=message, rejection=rejection)


CLINIC_HOURS_OK = "Horário dentro do funcionamento da clínica."
AVAILABILITY_OK = "Horário dentro da disponibilidade do psicólogo."
NO_BLACKOUT_OK = "Nenhum bloqueio de agenda na data selecionada."
SLOT_AVAILABLE = "Horário disponível para agendamento."

BLACKOUT_FALLBACK_REASON = "um bloqueio de agenda"


# =============================================================================
# RULES
# =============================================================================


def check_clinic_hours(
    candidate_date: date,
    start: TimeOfDay,
    end: TimeOfDay,
    clinic_hours: ClinicHoursPolicy = DEFAULT_CLINIC_HOURS,
) -> AppointmentValidation:
    """Check the slot against the clinic's opening hours for that weekday.

    Valid iff start >= opening, start <= last bookable start and
    end <= closing. Boundaries are checked in that order.
    """
    weekday = clinic_weekday(candidate_date)
    hours = clinic_hours.for_weekday(weekday)

    if hours is None:
        return AppointmentValidation.reject(
            Rejection.CLINIC_CLOSED, closed_day_message(weekday)
        )

    if start < hours.opening:
        return AppointmentValidation.reject(
            Rejection.BEFORE_OPENING,
            "O horário de início deve ser após o horário de abertura "
            f"da clínica ({hours.opening}).",
        )

    if start > hours.last_start:
        return AppointmentValidation.reject(
            Rejection.AFTER_LAST_BOOKABLE_START,
            f"O último horário permitido para agendamento é {hours.last_start}.",
        )

    if end > hours.closing:
        return AppointmentValidation.reject(
            Rejection.AFTER_CLOSING,
            "O horário de término deve ser antes do horário de fechamento "
            f"da clínica ({hours.closing}).",
        )

    return AppointmentValidation.accept(CLINIC_HOURS_OK)


def check_availability(
    candidate_date: date,
    start: TimeOfDay,
    end: TimeOfDay,
    availability: Iterable[AvailabilityWindow],
) -> AppointmentValidation:
    """Check the slot fits inside one of the psychologist's weekly windows.

    The slot must be contained in a single active window for the weekday;
    adjacent windows are not merged.
    """
    weekday = clinic_weekday(candidate_date)
    windows = [w for w in availability if w.weekday == weekday and w.is_active]

    if not windows:
        return AppointmentValidation.reject(
            Rejection.NO_AVAILABILITY_THIS_WEEKDAY,
            "O psicólogo não atende neste dia da semana "
            f"({weekday_name(weekday)}).",
        )

    if not any(w.contains(start, end) for w in windows):
        return AppointmentValidation.reject(
            Rejection.OUTSIDE_AVAILABILITY_WINDOW,
            "O horário escolhido está fora da disponibilidade do psicólogo.",
        )

    return AppointmentValidation.accept(AVAILABILITY_OK)


def check_blackout_periods(
    candidate_date: date,
    blackouts: Iterable[BlackoutPeriod],
) -> AppointmentValidation:
    """Check the date is not inside an approved blackout period.

    The first approved period covering the date, in iteration order, is
    reported.
    """
    for blackout in blackouts:
        if not blackout.is_approved:
            continue

        if blackout.covers(candidate_date):
            reason = blackout.reason or BLACKOUT_FALLBACK_REASON
            return AppointmentValidation.reject(
                Rejection.BLACKOUT_PERIOD,
                f"O psicólogo está indisponível na data selecionada devido a {reason}.",
            )

    return AppointmentValidation.accept(NO_BLACKOUT_OK)


def overlaps(
    start: TimeOfDay,
    end: TimeOfDay,
    other_start: TimeOfDay,
    other_end: TimeOfDay,
) -> bool:
    """Inclusive overlap test.

    Slots that only touch (one ends exactly when the other starts) count as
    overlapping, so back-to-back sessions are rejected.
    """
    return start <= other_end and end >= other_start


def check_conflicts(
    candidate_date: date,
    start: TimeOfDay,
    end: TimeOfDay,
    appointments: Iterable[ExistingAppointment],
    editing_appointment_id: Optional[int] = None,
) -> AppointmentValidation:
    """Check the slot does not overlap another appointment that day.

    Cancelled appointments and the appointment being edited are ignored. The
    first conflict in iteration order is reported.
    """
    day = as_date(candidate_date)
    for appointment in appointments:
        if editing_appointment_id is not None and appointment.id == editing_appointment_id:
            continue
        if appointment.is_cancelled:
            continue
        if appointment.date != day:
            continue

        if overlaps(start, end, appointment.start_time, appointment.end_time):
            return AppointmentValidation.reject(
                Rejection.CONFLICTING_APPOINTMENT,
                "Existe um agendamento conflitante no horário das "
                f"{appointment.start_time} às {appointment.end_time}.",
            )

    return AppointmentValidation.accept(SLOT_AVAILABLE)


# =============================================================================
# PIPELINE
# =============================================================================


@dataclass(frozen=True)
class ValidationContext:
    """Everything one validation run needs."""

    candidate: CandidateAppointment
    clinic_hours: ClinicHoursPolicy = DEFAULT_CLINIC_HOURS
    availability: Sequence[AvailabilityWindow] = field(default_factory=tuple)
    blackouts: Sequence[BlackoutPeriod] = field(default_factory=tuple)
    appointments: Sequence[ExistingAppointment] = field(default_factory=tuple)

    def owned(self, records: Iterable) -> list:
        """Drop records that belong to another psychologist."""
        return [
            r for r in records
            if self.candidate.belongs_to_psychologist(r.psychologist_id)
        ]


ValidationStage = Callable[[ValidationContext], AppointmentValidation]


def clinic_hours_stage(ctx: ValidationContext) -> AppointmentValidation:
    c = ctx.candidate
    return check_clinic_hours(c.date, c.start_time, c.end_time, ctx.clinic_hours)


def availability_stage(ctx: ValidationContext) -> AppointmentValidation:
    c = ctx.candidate
    return check_availability(c.date, c.start_time, c.end_time, ctx.owned(ctx.availability))


def blackout_stage(ctx: ValidationContext) -> AppointmentValidation:
    return check_blackout_periods(ctx.candidate.date, ctx.owned(ctx.blackouts))


def conflict_stage(ctx: ValidationContext) -> AppointmentValidation:
    c = ctx.candidate
    return check_conflicts(
        c.date,
        c.start_time,
        c.end_time,
        ctx.owned(ctx.appointments),
        c.editing_appointment_id,
    )


# Order matters: see module docstring
VALIDATION_STAGES: tuple[ValidationStage, ...] = (
    clinic_hours_stage,
    availability_stage,
    blackout_stage,
    conflict_stage,
)


def run_validation(
    ctx: ValidationContext,
    stages: Sequence[ValidationStage] = VALIDATION_STAGES,
) -> AppointmentValidation:
    """Run stages in order, stopping at the first rejection."""
    for stage in stages:
        result = stage(ctx)
        if not result.valid:
            return result

    return AppointmentValidation.accept(SLOT_AVAILABLE)


def validate_appointment(
    candidate_date: date | datetime,
    start_time: str | TimeOfDay,
    end_time: str | TimeOfDay,
    psychologist_id: int,
    availability: Iterable[AvailabilityWindow],
    blackouts: Iterable[BlackoutPeriod] = (),
    appointments: Iterable[ExistingAppointment] = (),
    editing_appointment_id: Optional[int] = None,
    clinic_hours: Optional[ClinicHoursPolicy] = None,
) -> AppointmentValidation:
    """Validate a proposed appointment slot.

    Args:
        candidate_date: Session date (a datetime is reduced to its date)
        start_time: "HH:MM" start
        end_time: "HH:MM" end
        psychologist_id: Psychologist being booked
        availability: Psychologist's weekly availability windows
        blackouts: Psychologist's blackout periods
        appointments: Appointments already booked with the psychologist
        editing_appointment_id: Appointment being edited, if any
        clinic_hours: Clinic hours table (defaults to DEFAULT_CLINIC_HOURS)

    Returns:
        AppointmentValidation with the first failing rule, or an accepted result

    Raises:
        ValueError: If a time string is not a valid "HH:MM" value

    Examples:
        >>> window = AvailabilityWindow.from_strings(2, "08:00", "12:00")
        >>> validate_appointment(date(2024, 3, 5), "08:00", "08:30", 1, [window]).valid
        True
        >>> validate_appointment(date(2024, 3, 5), "07:30", "08:00", 1, [window]).rejection
        <Rejection.BEFORE_OPENING: 'before_opening'>
    """
    candidate = CandidateAppointment(
        date=as_date(candidate_date),
        start_time=parse_time(start_time),
        end_time=parse_time(end_time),
        psychologist_id=psychologist_id,
        editing_appointment_id=editing_appointment_id,
    )

    ctx = ValidationContext(
        candidate=candidate,
        clinic_hours=clinic_hours or DEFAULT_CLINIC_HOURS,
        availability=tuple(availability),
        blackouts=tuple(blackouts),
        appointments=tuple(appointments),
    )

    return run_validation(ctx)
