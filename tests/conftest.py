from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.booking import BookingFlowUseCase
from barbershop.application.use_cases.manage_booking import ManageBookingUseCase
from barbershop.application.use_cases.schedule_policy import SchedulePolicy
from barbershop.application.use_cases.send_confirmation import SendConfirmationUseCase
from barbershop.domain.entities.schedule import WeeklySchedule
from barbershop.infrastructure.calendar.ics_export import IcsCalendarExport
from barbershop.infrastructure.email.mock_notifier import MockNotifier
from barbershop.infrastructure.holidays.static_holidays import StaticHolidayProvider
from barbershop.infrastructure.store.memory_store import MemoryReservationStore

MADRID = ZoneInfo("Europe/Madrid")

# Wednesday morning; 2025-02-20 is the Thursday after
WEDNESDAY_MORNING = datetime(2025, 2, 19, 9, 0, tzinfo=MADRID)
HOLIDAY = date(2025, 2, 28)  # Día de Andalucía, a Friday


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(WEDNESDAY_MORNING)


@pytest.fixture
def store() -> MemoryReservationStore:
    return MemoryReservationStore()


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()


@pytest.fixture
def policy() -> SchedulePolicy:
    schedule = WeeklySchedule.from_config("10:00-13:30,17:00-20:30", saturday_hours="")
    return SchedulePolicy(schedule=schedule, holidays=StaticHolidayProvider([HOLIDAY]), horizon_months=2)


@pytest.fixture
def calendar_export(clock) -> IcsCalendarExport:
    return IcsCalendarExport(
        business_name="41 Hair Studio",
        location="Parque de los Alcornocales, 1, Norte, 41015 Sevilla",
        timezone=MADRID,
        clock=clock,
    )


@pytest.fixture
def resolver(policy, store) -> AvailabilityResolver:
    return AvailabilityResolver(policy=policy, store=store, timezone=MADRID)


@pytest.fixture
def booking(policy, resolver, store, notifier, calendar_export, clock) -> BookingFlowUseCase:
    return BookingFlowUseCase(
        policy=policy,
        resolver=resolver,
        store=store,
        send_confirmation=SendConfirmationUseCase(notifier=notifier),
        calendar_export=calendar_export,
        timezone=MADRID,
        clock=clock,
    )


@pytest.fixture
def manage(policy, resolver, store, calendar_export, clock) -> ManageBookingUseCase:
    return ManageBookingUseCase(
        policy=policy,
        resolver=resolver,
        store=store,
        calendar_export=calendar_export,
        timezone=MADRID,
        clock=clock,
    )
