from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class NewReservation:
    date: date
    time: str  # HH:MM, on the 30-minute grid
    name: str
    email: str
    phone: str
    amount: float | None = None  # service price, recorded only
    payment_type: str | None = None


@dataclass(frozen=True)
class Reservation:
    id: str
    date: date
    time: str  # HH:MM, on the 30-minute grid
    name: str
    email: str
    phone: str
    created_at: str | None = None  # ISO timestamp assigned by the store
    amount: float | None = None
    payment_type: str | None = None

    @property
    def starts_at(self) -> datetime:
        """Naive local start of the appointment."""
        return datetime.combine(self.date, datetime.strptime(self.time, "%H:%M").time())

    def occupies(self, day: date, time: str) -> bool:
        return self.date == day and self.time == time
