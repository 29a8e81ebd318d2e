"""Utility functions."""

from clinica.utils.time import (
    TimeOfDay,
    as_date,
    clinic_weekday,
    format_time,
    parse_time,
    weekday_name,
)

__all__ = [
    "TimeOfDay",
    "as_date",
    "clinic_weekday",
    "format_time",
    "parse_time",
    "weekday_name",
]
