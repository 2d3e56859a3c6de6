from __future__ import annotations

import logging

from barbershop.application.ports.notifier import NotifierPort, Recipient
from barbershop.domain.entities.reservation import Reservation


class SendConfirmationUseCase:
    def __init__(self, notifier: NotifierPort) -> None:
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def execute(self, reservation: Reservation) -> bool:
        """Notify customer and owner. Returns True only if both were sent; never raises."""
        delivered = True
        for recipient in (Recipient.CUSTOMER, Recipient.OWNER):
            try:
                self._notifier.send_confirmation(recipient, reservation)
            except Exception as e:
                delivered = False
                self._logger.warning(
                    "Confirmation not sent",
                    extra={"reservation_id": reservation.id, "recipient": recipient.value, "error": str(e)},
                )
        return delivered
