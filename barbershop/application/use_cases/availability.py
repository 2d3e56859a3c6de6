from __future__ import annotations

import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from barbershop.application.exceptions import StoreUnavailable
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.use_cases.schedule_policy import SchedulePolicy
from barbershop.application.utils.date_parser import to_local_naive
from barbershop.application.utils.slots import booked_times, drop_past_slots, is_slot_free
from barbershop.domain.entities.reservation import Reservation


class AvailabilityResolver:
    def __init__(
        self,
        policy: SchedulePolicy,
        store: ReservationStorePort,
        timezone: ZoneInfo,
    ) -> None:
        self._policy = policy
        self._store = store
        self._timezone = timezone
        self._logger = logging.getLogger(__name__)

    def available_slots(
        self,
        day: date,
        now: datetime,
        editing: Reservation | None = None,
    ) -> list[str]:
        """
        Policy slots for `day` that start after `now` and are not booked.

        When `editing` is given, that reservation does not block any slot, but its
        own current slot is left out so a no-op reschedule cannot be picked.

        If the store cannot be read, falls back to policy slots minus past ones.
        This favours usability over correctness: a taken slot may be shown, and
        the check at confirmation time is what catches it.
        """
        candidates = drop_past_slots(day, self._policy.slots_for_date(day), to_local_naive(now, self._timezone))
        if not candidates:
            return []

        exclude_id = editing.id if editing else None
        try:
            booked = booked_times(self._store.list_by_date(day), exclude_id)
        except StoreUnavailable as e:
            self._logger.warning(
                "Reservation store unavailable, offering unfiltered slots",
                extra={"date": day.isoformat(), "error": str(e)},
            )
            booked = set()

        slots = [slot for slot in candidates if slot not in booked]
        if editing:
            slots = [slot for slot in slots if not editing.occupies(day, slot)]
        return slots

    def is_slot_available(
        self,
        day: date,
        time: str,
        now: datetime,
        exclude_id: str | None = None,
    ) -> bool:
        """Strict single-slot check for confirmation. StoreUnavailable propagates."""
        candidates = drop_past_slots(day, self._policy.slots_for_date(day), to_local_naive(now, self._timezone))
        if time not in candidates:
            return False
        return is_slot_free(time, self._store.list_by_date(day), exclude_id)
