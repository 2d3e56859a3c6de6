from abc import ABC, abstractmethod

from barbershop.domain.entities.reservation import Reservation


class CalendarExportPort(ABC):
    @abstractmethod
    def build(self, reservation: Reservation, with_reminder: bool = True) -> str:
        """Return a calendar-event document for the reservation."""
        raise NotImplementedError

    @property
    @abstractmethod
    def media_type(self) -> str:
        raise NotImplementedError
