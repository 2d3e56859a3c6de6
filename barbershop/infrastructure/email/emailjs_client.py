from __future__ import annotations

import logging
from typing import Any

import httpx

from barbershop.application.exceptions import NotificationFailure
from barbershop.application.ports.notifier import NotifierPort, Recipient
from barbershop.core.config import settings
from barbershop.domain.entities.reservation import Reservation


class EmailJsNotifier(NotifierPort):
    """Confirmation emails through the EmailJS REST API, one template per recipient."""

    def __init__(
        self,
        service_id: str | None = None,
        customer_template_id: str | None = None,
        owner_template_id: str | None = None,
        public_key: str | None = None,
        private_key: str | None = None,
        owner_email: str | None = None,
        send_endpoint: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._service_id = service_id or settings.EMAILJS_SERVICE_ID
        self._templates = {
            Recipient.CUSTOMER: customer_template_id or settings.EMAILJS_TEMPLATE_ID_CLIENT,
            Recipient.OWNER: owner_template_id or settings.EMAILJS_TEMPLATE_ID_OWNER,
        }
        self._public_key = public_key or settings.EMAILJS_PUBLIC_KEY
        self._private_key = private_key or settings.EMAILJS_PRIVATE_KEY
        self._owner_email = owner_email or settings.OWNER_EMAIL
        self._send_endpoint = send_endpoint or settings.EMAILJS_SEND_ENDPOINT
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._service_id or not self._public_key:
            raise ValueError("EMAILJS_SERVICE_ID and EMAILJS_PUBLIC_KEY are required for EmailJS")

    def send_confirmation(self, recipient: Recipient, reservation: Reservation) -> None:
        template_id = self._templates.get(recipient)
        if not template_id:
            raise NotificationFailure(f"No EmailJS template configured for {recipient.value}")

        payload: dict[str, Any] = {
            "service_id": self._service_id,
            "template_id": template_id,
            "user_id": self._public_key,
            "template_params": self._template_params(recipient, reservation),
        }
        if self._private_key:
            payload["accessToken"] = self._private_key

        try:
            resp = self._client.post(self._send_endpoint, json=payload)
        except httpx.HTTPError as e:
            raise NotificationFailure(f"EmailJS request failed: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "EmailJS send failed",
                extra={
                    "status": resp.status_code,
                    "error": resp.text[:500],
                    "recipient": recipient.value,
                    "reservation_id": reservation.id,
                },
            )
            raise NotificationFailure(f"EmailJS returned {resp.status_code}")

    def _template_params(self, recipient: Recipient, reservation: Reservation) -> dict[str, str]:
        if recipient is Recipient.CUSTOMER:
            return {
                "to_email": reservation.email,
                "to_name": reservation.name,
                "date": reservation.date.isoformat(),
                "time": reservation.time,
            }
        params = {
            "client_name": reservation.name,
            "client_email": reservation.email,
            "client_phone": reservation.phone,
            "date": reservation.date.isoformat(),
            "time": reservation.time,
        }
        if self._owner_email:
            params["to_email"] = self._owner_email
        return params
