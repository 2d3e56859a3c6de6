from abc import ABC, abstractmethod
from enum import Enum

from barbershop.domain.entities.reservation import Reservation


class Recipient(str, Enum):
    CUSTOMER = "customer"
    OWNER = "owner"


class NotifierPort(ABC):
    @abstractmethod
    def send_confirmation(self, recipient: Recipient, reservation: Reservation) -> None:
        """Send a booking confirmation. Raises NotificationFailure."""
        raise NotImplementedError
