"""Tests for the scheduling service.

Covers:
- Validation through the service with configured clinic hours
- Async entry point
- Bookable start-time lookup
- Settings wiring and rejection logging
"""

import logging
from datetime import date

import pytest

from clinica.booking.hours import ClinicHoursConfigError, ClinicHoursPolicy, DayHours
from clinica.booking.models import AvailabilityWindow, BlackoutPeriod, ExistingAppointment
from clinica.booking.policy import Rejection
from clinica.core.config import Settings
from clinica.services.scheduling import SchedulingService

SUNDAY = date(2024, 3, 3)
TUESDAY = date(2024, 3, 5)
SATURDAY = date(2024, 3, 9)

PSYCHOLOGIST_ID = 7


class TestValidate:
    """Slot validation through the service."""

    def test_valid_slot(self, scheduling_service, tuesday_morning):
        result = scheduling_service.validate(
            TUESDAY, "08:00", "08:30", PSYCHOLOGIST_ID, tuesday_morning
        )
        assert result.valid is True

    def test_uses_configured_clinic_hours(self, tuesday_morning):
        service = SchedulingService(
            clinic_hours=ClinicHoursPolicy(
                weekdays=DayHours.build("10:00", "18:00"),
                saturday=None,
            )
        )

        result = service.validate(TUESDAY, "08:00", "08:30", PSYCHOLOGIST_ID, tuesday_morning)

        assert result.rejection == Rejection.BEFORE_OPENING
        assert "10:00" in result.message

    def test_rejection_is_logged(self, scheduling_service, tuesday_morning, caplog):
        with caplog.at_level(logging.INFO, logger="clinica.services.scheduling"):
            scheduling_service.validate(
                SUNDAY, "08:00", "08:30", PSYCHOLOGIST_ID, tuesday_morning
            )

        records = [r for r in caplog.records if r.name == "clinica.services.scheduling"]
        assert len(records) == 1
        assert records[0].rejection == "clinic_closed"
        assert records[0].psychologist_id == PSYCHOLOGIST_ID

    def test_accepted_slot_not_logged_at_info(
        self, scheduling_service, tuesday_morning, caplog
    ):
        with caplog.at_level(logging.INFO, logger="clinica.services.scheduling"):
            scheduling_service.validate(
                TUESDAY, "08:00", "08:30", PSYCHOLOGIST_ID, tuesday_morning
            )

        assert not [r for r in caplog.records if r.name == "clinica.services.scheduling"]

    @pytest.mark.asyncio
    async def test_validate_async_matches_sync(
        self, scheduling_service, full_week_availability, confirmed_afternoon
    ):
        args = (TUESDAY, "14:30", "15:30", PSYCHOLOGIST_ID, full_week_availability)

        async_result = await scheduling_service.validate_async(
            *args, appointments=[confirmed_afternoon]
        )
        sync_result = scheduling_service.validate(*args, appointments=[confirmed_afternoon])

        assert async_result == sync_result
        assert async_result.rejection == Rejection.CONFLICTING_APPOINTMENT

    def test_session_end(self, scheduling_service):
        assert str(scheduling_service.session_end("09:00")) == "09:30"

    def test_session_end_custom_length(self):
        service = SchedulingService(session_minutes=50)
        assert str(service.session_end("09:00")) == "09:50"


class TestStartTimes:
    """Clinic start-time grid from the service."""

    def test_weekday_grid(self, scheduling_service):
        times = scheduling_service.start_times(TUESDAY)
        assert len(times) == 26

    def test_interval_from_service(self):
        service = SchedulingService(slot_interval_minutes=60)
        times = [str(t) for t in service.start_times(SATURDAY)]
        assert times[:3] == ["08:00", "09:00", "10:00"]


class TestAvailableStartTimes:
    """Start times that pass every booking rule."""

    def test_limited_to_availability(self, scheduling_service, tuesday_morning):
        times = scheduling_service.available_start_times(
            TUESDAY, PSYCHOLOGIST_ID, tuesday_morning
        )

        assert [str(t) for t in times] == [
            "08:00", "08:30", "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
        ]

    def test_excludes_conflicts_including_touching_slots(
        self, scheduling_service, tuesday_morning
    ):
        existing = ExistingAppointment.from_strings(1, TUESDAY, "09:30", "10:00")

        times = scheduling_service.available_start_times(
            TUESDAY, PSYCHOLOGIST_ID, tuesday_morning, appointments=[existing]
        )

        # 09:00-09:30 and 10:00-10:30 touch the existing slot
        assert [str(t) for t in times] == [
            "08:00", "08:30", "10:30", "11:00", "11:30",
        ]

    def test_editing_appointment_keeps_its_slot(self, scheduling_service, tuesday_morning):
        existing = ExistingAppointment.from_strings(1, TUESDAY, "09:30", "10:00")

        times = scheduling_service.available_start_times(
            TUESDAY,
            PSYCHOLOGIST_ID,
            tuesday_morning,
            appointments=[existing],
            editing_appointment_id=1,
        )

        assert len(times) == 8

    def test_longer_sessions(self, scheduling_service, tuesday_morning):
        times = scheduling_service.available_start_times(
            TUESDAY, PSYCHOLOGIST_ID, tuesday_morning, duration_minutes=60
        )

        assert str(times[-1]) == "11:00"

    def test_blackout_day_has_none(self, scheduling_service, tuesday_morning):
        blackout = BlackoutPeriod(start_date=TUESDAY, end_date=TUESDAY, is_approved=True)

        times = scheduling_service.available_start_times(
            TUESDAY, PSYCHOLOGIST_ID, tuesday_morning, blackouts=[blackout]
        )

        assert times == []

    def test_sunday_has_none(self, scheduling_service):
        windows = [AvailabilityWindow.from_strings(0, "08:00", "20:00")]
        assert scheduling_service.available_start_times(SUNDAY, PSYCHOLOGIST_ID, windows) == []

    def test_saturday_respects_closing(self, scheduling_service, full_week_availability):
        times = scheduling_service.available_start_times(
            SATURDAY, PSYCHOLOGIST_ID, full_week_availability, duration_minutes=60
        )

        # 14:00-15:00 still ends at closing; 14:30-15:30 does not
        assert str(times[-1]) == "14:00"

    def test_sessions_past_midnight_skipped(self):
        service = SchedulingService(
            clinic_hours=ClinicHoursPolicy(
                weekdays=DayHours.build("22:00", "23:59", "23:30"),
                saturday=None,
            )
        )
        windows = [AvailabilityWindow.from_strings(2, "22:00", "23:59")]

        times = service.available_start_times(
            TUESDAY, PSYCHOLOGIST_ID, windows, duration_minutes=30
        )

        assert [str(t) for t in times] == ["22:00", "22:30", "23:00"]


class TestFromSettings:
    """Building the service from application settings."""

    def test_defaults(self):
        service = SchedulingService.from_settings(Settings(_env_file=None))

        assert str(service.clinic_hours.weekdays.closing) == "21:00"
        assert service.session_minutes == 30
        assert service.slot_interval_minutes == 30

    def test_clinic_hours_file(self, tmp_path):
        path = tmp_path / "hours.yaml"
        path.write_text(
            'weekdays: {opening: "09:00", closing: "18:00"}\n'
            'saturday: null\n',
            encoding="utf-8",
        )

        settings = Settings(
            _env_file=None,
            clinic_hours_file=str(path),
            session_duration_minutes=50,
            slot_interval_minutes=60,
        )
        service = SchedulingService.from_settings(settings)

        assert str(service.clinic_hours.weekdays.last_start) == "17:10"
        assert service.clinic_hours.saturday is None
        assert service.session_minutes == 50
        assert service.slot_interval_minutes == 60

    def test_broken_clinic_hours_file(self, tmp_path):
        path = tmp_path / "hours.yaml"
        path.write_text("weekdays: {opening: 08:00, closing: 18:00}\n", encoding="utf-8")

        with pytest.raises(ClinicHoursConfigError):
            SchedulingService.from_settings(
                Settings(_env_file=None, clinic_hours_file=str(path))
            )

    def test_missing_clinic_hours_file(self, tmp_path):
        with pytest.raises(ClinicHoursConfigError, match="not found"):
            SchedulingService.from_settings(
                Settings(_env_file=None, clinic_hours_file=str(tmp_path / "missing.yaml"))
            )
