from __future__ import annotations

import logging
import threading
import time
from datetime import date
from typing import Callable, Iterable

import httpx

from barbershop.application.ports.holidays import HolidayProviderPort
from barbershop.core.config import settings


class NagerHolidayProvider(HolidayProviderPort):
    """
    Public holidays from the Nager.Date API.

    National holidays are always blocked; regional ones only when their
    `counties` include `subdivision` (e.g. "ES-AN"). A year is cached once it
    loads. On failure only `extra_dates` are returned, and the API is not
    asked again for that year until `retry_after_seconds` have passed.
    """

    def __init__(
        self,
        country_code: str | None = None,
        subdivision: str | None = None,
        extra_dates: Iterable[date] = (),
        base_url: str | None = None,
        client: httpx.Client | None = None,
        retry_after_seconds: float = 300.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._country_code = country_code or settings.HOLIDAY_COUNTRY_CODE
        self._subdivision = subdivision
        self._extra_dates = frozenset(extra_dates)
        self._base_url = base_url or settings.NAGER_BASE_URL
        self._client = client or httpx.Client(timeout=10.0)
        self._cache: dict[int, frozenset[date]] = {}
        self._failed_at: dict[int, float] = {}
        self._retry_after_seconds = retry_after_seconds
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def get_blackout_dates(self, year: int) -> frozenset[date]:
        with self._lock:
            cached = self._cache.get(year)
            failed_at = self._failed_at.get(year)
        if cached is not None:
            return cached
        if failed_at is not None and self._monotonic() - failed_at < self._retry_after_seconds:
            return self._extra_dates_in(year)

        try:
            holidays = self._fetch(year)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self._logger.warning(
                "Holiday lookup failed, no holidays blocked",
                extra={"year": year, "error": str(e)},
            )
            with self._lock:
                self._failed_at[year] = self._monotonic()
            return self._extra_dates_in(year)

        blocked = frozenset(holidays) | self._extra_dates_in(year)
        with self._lock:
            self._cache[year] = blocked
            self._failed_at.pop(year, None)
        return blocked

    def _fetch(self, year: int) -> list[date]:
        url = f"{self._base_url}/PublicHolidays/{year}/{self._country_code}"
        response = self._client.get(url)
        response.raise_for_status()

        dates: list[date] = []
        for holiday in response.json():
            counties = holiday.get("counties") or []
            if holiday.get("global", True) or (self._subdivision and self._subdivision in counties):
                dates.append(date.fromisoformat(holiday["date"]))
        return dates

    def _extra_dates_in(self, year: int) -> frozenset[date]:
        return frozenset(d for d in self._extra_dates if d.year == year)
