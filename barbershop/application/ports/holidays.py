from abc import ABC, abstractmethod
from datetime import date


class HolidayProviderPort(ABC):
    @abstractmethod
    def get_blackout_dates(self, year: int) -> frozenset[date]:
        """Blocked dates for `year`. Must fail open (empty set) instead of raising."""
        raise NotImplementedError
