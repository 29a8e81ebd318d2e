"""Time-of-day and calendar utilities.

Wall-clock times are handled as minutes since midnight so that every
comparison is a plain integer comparison, independent of timezone or DST.
Weekdays follow the clinic's convention: 0 = Sunday ... 6 = Saturday.
"""

from dataclasses import dataclass
from datetime import date, datetime, time

MINUTES_PER_DAY = 24 * 60

SUNDAY = 0
SATURDAY = 6

WEEKDAY_NAMES = (
    "Domingo",
    "Segunda-feira",
    "Terça-feira",
    "Quarta-feira",
    "Quinta-feira",
    "Sexta-feira",
    "Sábado",
)


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """Wall-clock time expressed as minutes since midnight."""

    minutes: int

    def __post_init__(self) -> None:
        if not 0 <= self.minutes < MINUTES_PER_DAY:
            raise ValueError(f"Time of day out of range: {self.minutes} minutes")

    @classmethod
    def parse(cls, value: "str | TimeOfDay | time") -> "TimeOfDay":
        """Parse an "HH:MM" string.

        A trailing seconds field ("HH:MM:SS", as stored in Postgres time
        columns) is accepted and ignored.

        Args:
            value: "HH:MM" string, datetime.time or an existing TimeOfDay

        Returns:
            TimeOfDay value

        Raises:
            ValueError: If the string cannot be parsed or is out of range
        """
        if isinstance(value, TimeOfDay):
            return value
        if isinstance(value, time):
            return cls.from_time(value)

        parts = value.strip().split(":")
        if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
            raise ValueError(f"Could not parse time of day: {value!r}")

        hour, minute = int(parts[0]), int(parts[1])
        if hour > 23 or minute > 59:
            raise ValueError(f"Time of day out of range: {value!r}")

        return cls(hour * 60 + minute)

    @classmethod
    def from_time(cls, value: time) -> "TimeOfDay":
        """Build from a datetime.time, dropping seconds."""
        return cls(value.hour * 60 + value.minute)

    @property
    def hour(self) -> int:
        return self.minutes // 60

    @property
    def minute(self) -> int:
        return self.minutes % 60

    def plus_minutes(self, minutes: int) -> "TimeOfDay":
        """Return a new time shifted by the given number of minutes."""
        return TimeOfDay(self.minutes + minutes)

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def parse_time(value: "str | TimeOfDay | time") -> TimeOfDay:
    """Parse an "HH:MM" value into a TimeOfDay."""
    return TimeOfDay.parse(value)


def format_time(value: TimeOfDay) -> str:
    """Format a TimeOfDay as "HH:MM"."""
    return str(value)


def as_date(value: date | datetime) -> date:
    """Reduce a datetime to its calendar date; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def clinic_weekday(value: date | datetime) -> int:
    """Get the weekday number with Sunday as 0 and Saturday as 6.

    Examples:
        >>> clinic_weekday(date(2024, 3, 3))  # Sunday
        0
        >>> clinic_weekday(date(2024, 3, 5))  # Tuesday
        2
    """
    return (as_date(value).weekday() + 1) % 7


def weekday_name(weekday: int) -> str:
    """Get the pt-BR name for a Sunday-first weekday number."""
    return WEEKDAY_NAMES[weekday]
