"""Snapshot records consumed by the appointment validator.

These are plain, read-only values. Callers load them from storage and hand
them over; the validator never fetches or mutates anything.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from clinica.utils.time import TimeOfDay, as_date, parse_time


class AppointmentStatus(str, Enum):
    """Appointment lifecycle status, as stored by the clinic."""

    SCHEDULED = "agendado"
    CONFIRMED = "confirmado"
    CANCELLED = "cancelado"
    COMPLETED = "realizado"


@dataclass(frozen=True)
class AvailabilityWindow:
    """Recurring weekly window in which a psychologist sees patients.

    Attributes:
        weekday: 0 = Sunday ... 6 = Saturday
        start_time: Window start
        end_time: Window end
        is_active: Inactive windows are ignored
        psychologist_id: Owner, if known
    """

    weekday: int
    start_time: TimeOfDay
    end_time: TimeOfDay
    is_active: bool = True
    psychologist_id: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 <= self.weekday <= 6:
            raise ValueError(f"Weekday must be 0-6, got {self.weekday}")
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Availability window must start before it ends "
                f"({self.start_time} - {self.end_time})"
            )

    @classmethod
    def from_strings(
        cls,
        weekday: int,
        start_time: str,
        end_time: str,
        is_active: bool = True,
        psychologist_id: Optional[int] = None,
    ) -> "AvailabilityWindow":
        return cls(
            weekday=weekday,
            start_time=parse_time(start_time),
            end_time=parse_time(end_time),
            is_active=is_active,
            psychologist_id=psychologist_id,
        )

    def contains(self, start: TimeOfDay, end: TimeOfDay) -> bool:
        """Check whether [start, end] lies inside this window (edges included)."""
        return self.start_time <= start and end <= self.end_time


@dataclass(frozen=True)
class BlackoutPeriod:
    """Time off (vacation, holiday, training) for a psychologist.

    Only approved periods block scheduling.
    """

    start_date: date
    end_date: date
    is_approved: bool = False
    reason: Optional[str] = None
    psychologist_id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError(
                f"Blackout period ends before it starts "
                f"({self.start_date} - {self.end_date})"
            )

    def covers(self, day: date) -> bool:
        """Check whether the day falls inside the period (both ends inclusive)."""
        return self.start_date <= as_date(day) <= self.end_date


@dataclass(frozen=True)
class ExistingAppointment:
    """An appointment already on the psychologist's agenda."""

    id: int
    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    psychologist_id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.start_time >= self.end_time:
            raise ValueError(
                f"Appointment {self.id} must start before it ends "
                f"({self.start_time} - {self.end_time})"
            )

    @classmethod
    def from_strings(
        cls,
        id: int,
        date: date,
        start_time: str,
        end_time: str,
        status: str = AppointmentStatus.SCHEDULED.value,
        psychologist_id: Optional[int] = None,
    ) -> "ExistingAppointment":
        return cls(
            id=id,
            date=as_date(date),
            start_time=parse_time(start_time),
            end_time=parse_time(end_time),
            status=AppointmentStatus(status),
            psychologist_id=psychologist_id,
        )

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED


@dataclass(frozen=True)
class CandidateAppointment:
    """The appointment being proposed (new booking or edit).

    Attributes:
        date: Calendar date of the session
        start_time: Session start
        end_time: Session end
        psychologist_id: Psychologist the session is booked with
        editing_appointment_id: Id of the appointment being replaced when
            editing; it is excluded from the conflict check
    """

    date: date
    start_time: TimeOfDay
    end_time: TimeOfDay
    psychologist_id: int
    editing_appointment_id: Optional[int] = None

    def belongs_to_psychologist(self, psychologist_id: Optional[int]) -> bool:
        """Check whether a snapshot record applies to this candidate.

        Records without an owner are trusted to have been pre-filtered by the
        caller.
        """
        return psychologist_id is None or psychologist_id == self.psychologist_id
