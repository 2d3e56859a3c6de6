from __future__ import annotations

from datetime import date
from typing import Iterable

from barbershop.application.ports.holidays import HolidayProviderPort


class StaticHolidayProvider(HolidayProviderPort):
    """Blackout dates from configuration only."""

    def __init__(self, dates: Iterable[date] = ()) -> None:
        self._dates = frozenset(dates)

    def get_blackout_dates(self, year: int) -> frozenset[date]:
        return frozenset(d for d in self._dates if d.year == year)
