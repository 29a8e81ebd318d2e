"""Booking module: clinic hours and appointment slot validation."""

from clinica.booking.hours import (
    DEFAULT_CLINIC_HOURS,
    ClinicHoursConfigError,
    ClinicHoursPolicy,
    DayHours,
    generate_start_times,
    load_clinic_hours,
)
from clinica.booking.models import (
    AppointmentStatus,
    AvailabilityWindow,
    BlackoutPeriod,
    CandidateAppointment,
    ExistingAppointment,
)
from clinica.booking.policy import (
    AppointmentValidation,
    Rejection,
    ValidationContext,
    run_validation,
    validate_appointment,
)

__all__ = [
    "DEFAULT_CLINIC_HOURS",
    "ClinicHoursConfigError",
    "ClinicHoursPolicy",
    "DayHours",
    "generate_start_times",
    "load_clinic_hours",
    "AppointmentStatus",
    "AvailabilityWindow",
    "BlackoutPeriod",
    "CandidateAppointment",
    "ExistingAppointment",
    "AppointmentValidation",
    "Rejection",
    "ValidationContext",
    "run_validation",
    "validate_appointment",
]
