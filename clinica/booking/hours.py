"""Clinic operating hours.

The clinic runs three schedules: Monday to Friday, a shorter Saturday and a
closed Sunday. The table is an immutable value handed to the validator so a
clinic can override it (see ``load_clinic_hours``) without code changes.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml

from clinica.utils.time import SATURDAY, SUNDAY, TimeOfDay, clinic_weekday, parse_time

# Shortest bookable session; the last start of the day leaves room for it
DEFAULT_SESSION_MINUTES = 30

# pt-BR "closed on <day>s" labels, indexed by Sunday-first weekday
CLOSED_DAY_LABELS = (
    "aos domingos",
    "às segundas-feiras",
    "às terças-feiras",
    "às quartas-feiras",
    "às quintas-feiras",
    "às sextas-feiras",
    "aos sábados",
)


class ClinicHoursConfigError(ValueError):
    """Raised when a clinic hours file cannot be used."""

    pass


@dataclass(frozen=True)
class DayHours:
    """Opening envelope for one day.

    Attributes:
        opening: First bookable start
        closing: Sessions must end by this time
        last_start: Latest bookable start
    """

    opening: TimeOfDay
    closing: TimeOfDay
    last_start: TimeOfDay

    def __post_init__(self) -> None:
        if not self.opening <= self.last_start <= self.closing:
            raise ValueError(
                "Clinic hours must satisfy opening <= last_start <= closing "
                f"(got {self.opening}, {self.last_start}, {self.closing})"
            )

    @classmethod
    def build(
        cls,
        opening: str,
        closing: str,
        last_start: Optional[str] = None,
        session_minutes: int = DEFAULT_SESSION_MINUTES,
    ) -> "DayHours":
        """Build from "HH:MM" strings.

        When ``last_start`` is omitted it is derived as closing time minus
        the session length.
        """
        closing_time = parse_time(closing)
        if last_start is None:
            last_start_time = closing_time.plus_minutes(-session_minutes)
        else:
            last_start_time = parse_time(last_start)

        return cls(
            opening=parse_time(opening),
            closing=closing_time,
            last_start=last_start_time,
        )

    def as_dict(self) -> dict[str, str]:
        return {
            "opening": str(self.opening),
            "closing": str(self.closing),
            "last_start": str(self.last_start),
        }


@dataclass(frozen=True)
class ClinicHoursPolicy:
    """Per-weekday clinic hours. ``None`` means the clinic is closed.

    Sunday has no bucket: the clinic never opens on Sundays.
    """

    weekdays: Optional[DayHours]
    saturday: Optional[DayHours]

    def for_weekday(self, weekday: int) -> Optional[DayHours]:
        """Get the hours for a Sunday-first weekday number."""
        if weekday == SUNDAY:
            return None
        if weekday == SATURDAY:
            return self.saturday
        return self.weekdays

    def for_date(self, day: date) -> Optional[DayHours]:
        return self.for_weekday(clinic_weekday(day))

    def as_dict(self) -> dict[str, Optional[dict[str, str]]]:
        return {
            "weekdays": self.weekdays.as_dict() if self.weekdays else None,
            "saturday": self.saturday.as_dict() if self.saturday else None,
            "sunday": None,
        }


DEFAULT_CLINIC_HOURS = ClinicHoursPolicy(
    weekdays=DayHours.build("08:00", "21:00", "20:30"),
    saturday=DayHours.build("08:00", "15:00", "14:30"),
)


def closed_day_message(weekday: int) -> str:
    """Rejection message for a day the clinic does not open."""
    return f"A clínica não funciona {CLOSED_DAY_LABELS[weekday]}."


def generate_start_times(
    policy: ClinicHoursPolicy,
    day: date,
    interval_minutes: int = 30,
) -> list[TimeOfDay]:
    """List the start times the booking form offers for a date.

    Runs from opening to the last bookable start (inclusive) in steps of
    ``interval_minutes``. Closed days have no start times.

    Examples:
        >>> [str(t) for t in generate_start_times(DEFAULT_CLINIC_HOURS, date(2024, 3, 9))][-1]
        '14:30'
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    hours = policy.for_date(day)
    if hours is None:
        return []

    times = []
    current = hours.opening.minutes
    while current <= hours.last_start.minutes:
        times.append(TimeOfDay(current))
        current += interval_minutes

    return times


def _parse_day(
    name: str,
    raw: Any,
    session_minutes: int,
) -> Optional[DayHours]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ClinicHoursConfigError(f"'{name}' must be a mapping or null")

    values = {}
    for key in ("opening", "closing", "last_start"):
        value = raw.get(key)
        if value is None:
            continue
        # Unquoted 18:00 is read by YAML 1.1 as a base-60 integer
        if not isinstance(value, str):
            raise ClinicHoursConfigError(
                f"'{name}.{key}' must be a quoted \"HH:MM\" string, got {value!r}"
            )
        values[key] = value

    if "opening" not in values or "closing" not in values:
        raise ClinicHoursConfigError(f"'{name}' requires opening and closing")

    try:
        return DayHours.build(
            values["opening"],
            values["closing"],
            values.get("last_start"),
            session_minutes=session_minutes,
        )
    except ValueError as e:
        raise ClinicHoursConfigError(f"Invalid hours for '{name}': {e}") from e


def parse_clinic_hours(
    data: dict[str, Any],
    session_minutes: int = DEFAULT_SESSION_MINUTES,
) -> ClinicHoursPolicy:
    """Build a policy from a parsed mapping (weekdays/saturday).

    A ``sunday`` key is accepted only as null.
    """
    if not isinstance(data, dict):
        raise ClinicHoursConfigError("Clinic hours must be a mapping")
    if data.get("sunday") is not None:
        raise ClinicHoursConfigError("The clinic does not open on Sundays; 'sunday' must be null")

    return ClinicHoursPolicy(
        weekdays=_parse_day("weekdays", data.get("weekdays"), session_minutes),
        saturday=_parse_day("saturday", data.get("saturday"), session_minutes),
    )


def load_clinic_hours(
    path: Path | str,
    session_minutes: int = DEFAULT_SESSION_MINUTES,
) -> ClinicHoursPolicy:
    """Load a clinic hours table from a YAML file.

    Args:
        path: YAML file with weekdays/saturday entries
        session_minutes: Session length used to derive missing last_start

    Returns:
        ClinicHoursPolicy

    Raises:
        ClinicHoursConfigError: If the file is missing or is not a valid table
    """
    filepath = Path(path)

    if not filepath.exists():
        raise ClinicHoursConfigError(f"Clinic hours file not found: {filepath}")

    try:
        data = yaml.safe_load(filepath.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ClinicHoursConfigError(f"Invalid YAML in {filepath}: {e}") from e

    return parse_clinic_hours(data, session_minutes=session_minutes)
