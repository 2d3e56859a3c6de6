from datetime import date, datetime
from typing import Callable

from fastapi import APIRouter, Depends

from barbershop.api.v1.schemas import DateAvailabilitySchema
from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.schedule_policy import DateStatus, SchedulePolicy
from barbershop.application.utils.date_parser import to_local_naive
from barbershop.wiring.dependencies import get_availability_resolver, get_clock, get_schedule_policy, get_timezone

router = APIRouter()


@router.get("/dates/{day}", response_model=DateAvailabilitySchema)
def date_availability(
    day: date,
    policy: SchedulePolicy = Depends(get_schedule_policy),
    resolver: AvailabilityResolver = Depends(get_availability_resolver),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    now = clock()
    status = policy.date_status(day, to_local_naive(now, get_timezone()).date())
    slots = resolver.available_slots(day, now) if status is DateStatus.OPEN else []
    return DateAvailabilitySchema(date=day, status=status, hours=policy.describe_hours(day), slots=slots)
