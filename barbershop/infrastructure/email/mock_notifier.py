from __future__ import annotations

import logging

from barbershop.application.ports.notifier import NotifierPort, Recipient
from barbershop.domain.entities.reservation import Reservation


class MockNotifier(NotifierPort):
    def __init__(self) -> None:
        self.sent: list[tuple[Recipient, Reservation]] = []
        self._logger = logging.getLogger(__name__)

    def send_confirmation(self, recipient: Recipient, reservation: Reservation) -> None:
        self.sent.append((recipient, reservation))
        self._logger.info(
            "Mock confirmation sent",
            extra={"recipient": recipient.value, "reservation_id": reservation.id},
        )
