from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class BookingStep(str, Enum):
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    ENTERING_DETAILS = "entering_details"
    REVIEWING = "reviewing"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStep.CONFIRMED, BookingStep.CANCELLED)


@dataclass(frozen=True)
class BookingDraft:
    step: BookingStep = BookingStep.SELECTING_DATE
    date: date | None = None
    time: str | None = None  # HH:MM
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    offered_slots: tuple[str, ...] = ()  # resolver output the time must come from
    reservation_id: str | None = None
