from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date, datetime, timezone

from barbershop.application.exceptions import AvailabilityConflict, ReservationNotFound
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.utils.slots import is_slot_free
from barbershop.domain.entities.reservation import NewReservation, Reservation


class MemoryReservationStore(ReservationStorePort):
    """In-process store. (date, time) uniqueness is enforced under a lock, so racing creates cannot double-book."""

    def __init__(self) -> None:
        self._reservations: dict[str, Reservation] = {}
        self._archived: dict[str, Reservation] = {}
        self._lock = threading.Lock()

    def list_by_date(self, day: date) -> list[Reservation]:
        with self._lock:
            return self._on_date(day)

    def list_by_phone(self, phone: str, from_date: date) -> list[Reservation]:
        with self._lock:
            found = [r for r in self._reservations.values() if r.phone == phone and r.date >= from_date]
        return sorted(found, key=lambda r: (r.date, r.time))

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            return self._reservations.get(reservation_id)

    def create(self, reservation: NewReservation) -> Reservation:
        with self._lock:
            if not is_slot_free(reservation.time, self._on_date(reservation.date)):
                raise AvailabilityConflict(reservation.date, reservation.time)
            created = Reservation(
                id=uuid.uuid4().hex,
                date=reservation.date,
                time=reservation.time,
                name=reservation.name,
                email=reservation.email,
                phone=reservation.phone,
                created_at=datetime.now(timezone.utc).isoformat(),
                amount=reservation.amount,
                payment_type=reservation.payment_type,
            )
            self._reservations[created.id] = created
            return created

    def archive(self, reservation_id: str) -> bool:
        with self._lock:
            reservation = self._reservations.pop(reservation_id, None)
            if reservation is None:
                return False
            self._archived[reservation_id] = reservation
            return True

    def update(self, reservation_id: str, day: date, time: str) -> Reservation:
        with self._lock:
            current = self._reservations.get(reservation_id)
            if current is None:
                raise ReservationNotFound(reservation_id)
            if not is_slot_free(time, self._on_date(day), exclude_id=reservation_id):
                raise AvailabilityConflict(day, time)
            updated = replace(current, date=day, time=time)
            self._reservations[reservation_id] = updated
            return updated

    def _on_date(self, day: date) -> list[Reservation]:
        return sorted((r for r in self._reservations.values() if r.date == day), key=lambda r: r.time)
