from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from barbershop.domain.entities.reservation import NewReservation, Reservation


class ReservationStorePort(ABC):
    """Persistence for reservations.

    Adapters raise StoreUnavailable for transport failures. Adapters that can
    enforce (date, time) uniqueness raise AvailabilityConflict from create()
    and update(); the pre-write availability check in the use cases is only
    an optimistic guard.
    """

    @abstractmethod
    def list_by_date(self, day: date) -> list[Reservation]:
        """Non-cancelled reservations on `day`."""
        raise NotImplementedError

    @abstractmethod
    def list_by_phone(self, phone: str, from_date: date) -> list[Reservation]:
        """Non-cancelled reservations for `phone` on or after `from_date`, sorted by date then time."""
        raise NotImplementedError

    @abstractmethod
    def get(self, reservation_id: str) -> Reservation | None:
        raise NotImplementedError

    @abstractmethod
    def create(self, reservation: NewReservation) -> Reservation:
        raise NotImplementedError

    @abstractmethod
    def archive(self, reservation_id: str) -> bool:
        """Logical delete. Returns False if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def update(self, reservation_id: str, day: date, time: str) -> Reservation:
        """Move a reservation to a new slot. Raises ReservationNotFound for unknown ids."""
        raise NotImplementedError
