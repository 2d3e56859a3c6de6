from datetime import datetime
from functools import lru_cache
import logging
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.core.config import settings
from barbershop.application.ports.calendar_export import CalendarExportPort
from barbershop.application.ports.flow_store import FlowStorePort
from barbershop.application.ports.holidays import HolidayProviderPort
from barbershop.application.ports.notifier import NotifierPort
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.booking import BookingFlowUseCase
from barbershop.application.use_cases.manage_booking import ManageBookingUseCase
from barbershop.application.use_cases.schedule_policy import SchedulePolicy
from barbershop.application.use_cases.send_confirmation import SendConfirmationUseCase
from barbershop.domain.entities.schedule import WeeklySchedule
from barbershop.infrastructure.calendar.ics_export import IcsCalendarExport
from barbershop.infrastructure.email.emailjs_client import EmailJsNotifier
from barbershop.infrastructure.email.mock_notifier import MockNotifier
from barbershop.infrastructure.holidays.nager_client import NagerHolidayProvider
from barbershop.infrastructure.holidays.static_holidays import StaticHolidayProvider
from barbershop.infrastructure.store.json_store import JsonReservationStore
from barbershop.infrastructure.store.memory_flow_store import MemoryFlowStore
from barbershop.infrastructure.store.memory_store import MemoryReservationStore
from barbershop.infrastructure.store.notion_store import NotionReservationStore


logger = logging.getLogger(__name__)


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


def get_clock() -> Callable[[], datetime]:
    tz = get_timezone()
    return lambda: datetime.now(tz)


@lru_cache
def get_reservation_store() -> ReservationStorePort:
    provider = settings.STORE_PROVIDER.lower()
    if provider == "notion":
        return NotionReservationStore(timezone=get_timezone())
    if provider == "json":
        return JsonReservationStore(path=settings.JSON_STORE_PATH)
    if provider != "memory":
        raise ValueError(f"Unknown STORE_PROVIDER: {settings.STORE_PROVIDER}")
    return MemoryReservationStore()


@lru_cache
def get_holiday_provider() -> HolidayProviderPort:
    if settings.HOLIDAY_PROVIDER.lower() == "static":
        return StaticHolidayProvider(settings.EXTRA_BLACKOUT_DATES)
    return NagerHolidayProvider(
        country_code=settings.HOLIDAY_COUNTRY_CODE,
        subdivision=settings.HOLIDAY_SUBDIVISION,
        extra_dates=settings.EXTRA_BLACKOUT_DATES,
        retry_after_seconds=settings.HOLIDAY_RETRY_AFTER_SECONDS,
    )


@lru_cache
def get_notifier() -> NotifierPort:
    if not settings.EMAILJS_SERVICE_ID or settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MockNotifier (EmailJS not configured or ENV=dev/local)")
        return MockNotifier()
    return EmailJsNotifier()


@lru_cache
def get_calendar_export() -> CalendarExportPort:
    return IcsCalendarExport(
        business_name=settings.BUSINESS_NAME,
        location=settings.BUSINESS_LOCATION,
        timezone=get_timezone(),
    )


@lru_cache
def get_flow_store() -> FlowStorePort:
    return MemoryFlowStore()


@lru_cache
def get_schedule_policy() -> SchedulePolicy:
    schedule = WeeklySchedule.from_config(
        weekday_hours=settings.WEEKDAY_HOURS,
        saturday_hours=settings.SATURDAY_HOURS,
        overrides=settings.OPENING_HOURS_OVERRIDES,
    )
    return SchedulePolicy(
        schedule=schedule,
        holidays=get_holiday_provider(),
        horizon_months=settings.BOOKING_HORIZON_MONTHS,
    )


def get_availability_resolver() -> AvailabilityResolver:
    return AvailabilityResolver(
        policy=get_schedule_policy(),
        store=get_reservation_store(),
        timezone=get_timezone(),
    )


def get_booking_use_case() -> BookingFlowUseCase:
    return BookingFlowUseCase(
        policy=get_schedule_policy(),
        resolver=get_availability_resolver(),
        store=get_reservation_store(),
        send_confirmation=SendConfirmationUseCase(notifier=get_notifier()),
        calendar_export=get_calendar_export(),
        timezone=get_timezone(),
        require_phone=settings.REQUIRE_PHONE,
        calendar_reminder=settings.CALENDAR_REMINDER,
        clock=get_clock(),
    )


def get_manage_use_case() -> ManageBookingUseCase:
    return ManageBookingUseCase(
        policy=get_schedule_policy(),
        resolver=get_availability_resolver(),
        store=get_reservation_store(),
        calendar_export=get_calendar_export(),
        timezone=get_timezone(),
        calendar_reminder=settings.CALENDAR_REMINDER,
        clock=get_clock(),
    )
