from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from barbershop.domain.entities.reservation import Reservation
from barbershop.domain.entities.schedule import SLOT_MINUTES, TimeWindow, WeeklySchedule


def generate_time_slots(window: TimeWindow) -> list[str]:
    """Every SLOT_MINUTES from window start through window end, end included."""
    slots: list[str] = []
    current = datetime.combine(date.min, window.start)
    end = datetime.combine(date.min, window.end)
    while current <= end:
        slots.append(current.strftime("%H:%M"))
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


def slots_for_date(day: date, schedule: WeeklySchedule, blackout: Iterable[date] = ()) -> list[str]:
    if day in set(blackout):
        return []
    slots: list[str] = []
    for window in schedule.windows_for(day.weekday()):
        for slot in generate_time_slots(window):
            if slot not in slots:
                slots.append(slot)
    return sorted(slots)


def drop_past_slots(day: date, slots: Iterable[str], now: datetime) -> list[str]:
    """Keep slots whose start is strictly after `now` (naive, business-local)."""
    return [
        slot for slot in slots
        if datetime.combine(day, datetime.strptime(slot, "%H:%M").time()) > now
    ]


def booked_times(reservations: Iterable[Reservation], exclude_id: str | None = None) -> set[str]:
    return {r.time for r in reservations if r.id != exclude_id}


def is_slot_free(time: str, reservations: Iterable[Reservation], exclude_id: str | None = None) -> bool:
    """Single source of truth for "is this slot free", given the reservations of its date.

    Used by the resolver (listing and confirmation checks) and by stores that
    enforce uniqueness on write. `exclude_id` lets a reservation being
    rescheduled ignore its own current slot.
    """
    return time not in booked_times(reservations, exclude_id)
