"""Scheduling API endpoints.

Slot validation and start-time lookup for the booking form. Callers send
the psychologist's agenda snapshot with each request.
"""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from clinica.api.deps import Scheduling
from clinica.schemas.scheduling import (
    AvailableStartTimesRequest,
    ClinicHoursResponse,
    StartTimesResponse,
    ValidateAppointmentRequest,
    ValidateAppointmentResponse,
)

router = APIRouter()


@router.post(
    "/validate",
    response_model=ValidateAppointmentResponse,
)
async def validate_appointment_slot(
    request: ValidateAppointmentRequest,
    service: Scheduling,
) -> ValidateAppointmentResponse:
    """Check whether an appointment slot can be booked.

    Rule rejections are returned with 200 and ``valid=false``; the message
    is meant to be shown to the user as is.
    """
    try:
        end_time = request.end_time or service.session_end(request.start_time)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Session would end after midnight",
        ) from e

    result = await service.validate_async(
        candidate_date=request.date,
        start_time=request.start_time,
        end_time=end_time,
        psychologist_id=request.psychologist_id,
        availability=request.availability_domain(),
        blackouts=request.blackouts_domain(),
        appointments=request.appointments_domain(),
        editing_appointment_id=request.appointment_id,
    )

    return ValidateAppointmentResponse(
        valid=result.valid,
        message=result.message,
        rejection=result.rejection,
    )


@router.post(
    "/available-start-times",
    response_model=StartTimesResponse,
)
async def list_available_start_times(
    request: AvailableStartTimesRequest,
    service: Scheduling,
) -> StartTimesResponse:
    """List start times that pass every booking rule for the date."""
    start_times = service.available_start_times(
        day=request.date,
        psychologist_id=request.psychologist_id,
        availability=request.availability_domain(),
        blackouts=request.blackouts_domain(),
        appointments=request.appointments_domain(),
        duration_minutes=request.duration_minutes,
        editing_appointment_id=request.appointment_id,
    )

    return StartTimesResponse(
        date=request.date,
        start_times=[str(t) for t in start_times],
    )


@router.get(
    "/clinic-hours",
    response_model=ClinicHoursResponse,
)
async def get_clinic_hours(service: Scheduling) -> ClinicHoursResponse:
    """Get the clinic opening hours table."""
    return ClinicHoursResponse.model_validate(service.clinic_hours.as_dict())


@router.get(
    "/start-times",
    response_model=StartTimesResponse,
)
async def get_clinic_start_times(
    service: Scheduling,
    day: date = Query(..., alias="date"),
) -> StartTimesResponse:
    """Get the clinic's start-time grid for a date, ignoring agendas."""
    return StartTimesResponse(
        date=day,
        start_times=[str(t) for t in service.start_times(day)],
    )
