from __future__ import annotations

from datetime import date
from enum import Enum

from barbershop.application.ports.holidays import HolidayProviderPort
from barbershop.application.utils.date_parser import add_months
from barbershop.application.utils.slots import slots_for_date
from barbershop.domain.entities.schedule import WeeklySchedule


class DateStatus(str, Enum):
    OPEN = "open"
    PAST = "past"
    CLOSED = "closed"
    HOLIDAY = "holiday"
    BEYOND_HORIZON = "beyond_horizon"


DATE_STATUS_MESSAGES = {
    DateStatus.PAST: "This date is in the past",
    DateStatus.CLOSED: "We are closed for online booking on this day",
    DateStatus.HOLIDAY: "We are closed on this holiday",
    DateStatus.BEYOND_HORIZON: "This date is too far ahead, please pick an earlier one",
}


class SchedulePolicy:
    """Weekly opening hours plus blackout dates, mapped onto the 30-minute slot grid."""

    def __init__(
        self,
        schedule: WeeklySchedule,
        holidays: HolidayProviderPort,
        horizon_months: int = 2,
    ) -> None:
        self._schedule = schedule
        self._holidays = holidays
        self._horizon_months = horizon_months

    def slots_for_date(self, day: date) -> list[str]:
        """Bookable start times for `day`, earliest first. Empty for Sundays, closed days and blackouts."""
        if self._schedule.is_closed_weekday(day.weekday()):
            return []
        return slots_for_date(day, self._schedule, self._holidays.get_blackout_dates(day.year))

    def horizon_end(self, today: date) -> date:
        """Last date offered for booking; dates after it are not shown."""
        return add_months(today, self._horizon_months)

    def date_status(self, day: date, today: date) -> DateStatus:
        if day < today:
            return DateStatus.PAST
        if day > self.horizon_end(today):
            return DateStatus.BEYOND_HORIZON
        if self._schedule.is_closed_weekday(day.weekday()):
            return DateStatus.CLOSED
        if day in self._holidays.get_blackout_dates(day.year):
            return DateStatus.HOLIDAY
        return DateStatus.OPEN

    def describe_hours(self, day: date) -> str:
        windows = self._schedule.windows_for(day.weekday())
        if not windows or day in self._holidays.get_blackout_dates(day.year):
            return "Closed"
        return ", ".join(w.label for w in windows)
