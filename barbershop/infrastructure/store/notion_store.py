from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import httpx

from barbershop.application.exceptions import ReservationNotFound, StoreUnavailable
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.core.config import settings
from barbershop.domain.entities.reservation import NewReservation, Reservation

# Property names of the reservations database
PROP_NAME = "Nombre"
PROP_EMAIL = "Correo Electrónico"
PROP_PHONE = "Teléfono"
PROP_DATE = "Fecha"  # date property holding date + time with offset
PROP_AMOUNT = "Monto"  # optional number
PROP_PAYMENT_TYPE = "Tipo de pago"  # optional select


class NotionReservationStore(ReservationStorePort):
    """
    Reservations kept as pages of a Notion database; cancel archives the page.

    Notion has no conditional write or unique constraint, so create() cannot
    reject a duplicate (date, time). Only the pre-write check in the booking
    flow guards against double-booking with this store.
    """

    def __init__(
        self,
        token: str | None = None,
        database_id: str | None = None,
        base_url: str | None = None,
        notion_version: str | None = None,
        timezone: ZoneInfo | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._token = token or settings.NOTION_TOKEN
        self._database_id = database_id or settings.NOTION_DATABASE_ID
        self._base_url = base_url or settings.NOTION_API_BASE
        self._notion_version = notion_version or settings.NOTION_VERSION
        self._timezone = timezone or ZoneInfo(settings.BUSINESS_TIMEZONE)
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._token or not self._database_id:
            raise ValueError("NOTION_TOKEN and NOTION_DATABASE_ID are required for the Notion store")

    def list_by_date(self, day: date) -> list[Reservation]:
        pages = self._query(
            {
                "filter": {
                    "and": [
                        {"property": PROP_DATE, "date": {"on_or_after": day.isoformat()}},
                        {"property": PROP_DATE, "date": {"before": (day + timedelta(days=1)).isoformat()}},
                    ]
                }
            }
        )
        return [r for r in (self._parse_page(p) for p in pages) if r.date == day and r.time]

    def list_by_phone(self, phone: str, from_date: date) -> list[Reservation]:
        pages = self._query(
            {
                "filter": {
                    "and": [
                        {"property": PROP_PHONE, "phone_number": {"equals": phone}},
                        {"property": PROP_DATE, "date": {"on_or_after": from_date.isoformat()}},
                    ]
                },
                "sorts": [{"property": PROP_DATE, "direction": "ascending"}],
            }
        )
        # pages holding only a date have no slot and cannot be managed
        found = [r for r in (self._parse_page(p) for p in pages) if r.time]
        return sorted(found, key=lambda r: (r.date, r.time))

    def get(self, reservation_id: str) -> Reservation | None:
        response = self._request("GET", f"/pages/{reservation_id}")
        if response.status_code == 404:
            return None
        page = self._json(response)
        if page.get("archived") or page.get("in_trash"):
            return None
        return self._parse_page(page)

    def create(self, reservation: NewReservation) -> Reservation:
        payload = {
            "parent": {"database_id": self._database_id},
            "properties": self._build_properties(
                name=reservation.name,
                email=reservation.email,
                phone=reservation.phone,
                day=reservation.date,
                time=reservation.time,
                amount=reservation.amount,
                payment_type=reservation.payment_type,
            ),
        }
        created = self._parse_page(self._json(self._request("POST", "/pages", json=payload)))
        self._logger.info("Notion reservation created", extra={"reservation_id": created.id})
        return created

    def archive(self, reservation_id: str) -> bool:
        response = self._request("PATCH", f"/pages/{reservation_id}", json={"archived": True})
        if response.status_code == 404:
            return False
        self._json(response)
        return True

    def update(self, reservation_id: str, day: date, time: str) -> Reservation:
        payload = {"properties": self._build_properties(day=day, time=time)}
        response = self._request("PATCH", f"/pages/{reservation_id}", json=payload)
        if response.status_code == 404:
            raise ReservationNotFound(reservation_id)
        return self._parse_page(self._json(response))

    def _query(self, body: dict[str, Any]) -> list[dict[str, Any]]:
        """Query the database, following pagination cursors."""
        pages: list[dict[str, Any]] = []
        payload = dict(body)
        while True:
            data = self._json(self._request("POST", f"/databases/{self._database_id}/query", json=payload))
            pages.extend(data.get("results", []))
            if not data.get("has_more") or not data.get("next_cursor"):
                return pages
            payload["start_cursor"] = data["next_cursor"]

    def _request(self, method: str, path: str, json: dict[str, Any] | None = None) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
            "Notion-Version": self._notion_version,
        }
        try:
            return self._client.request(method, f"{self._base_url}{path}", json=json, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Notion request failed", extra={"error": str(e)})
            raise StoreUnavailable(f"Notion request failed: {e}") from e

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPStatusError, ValueError) as e:
            self._logger.error(
                "Notion API error",
                extra={"status": response.status_code, "error": response.text[:500]},
            )
            raise StoreUnavailable(f"Notion API error {response.status_code}") from e

    def _build_properties(
        self,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        day: date | None = None,
        time: str | None = None,
        amount: float | None = None,
        payment_type: str | None = None,
    ) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        if name is not None:
            properties[PROP_NAME] = {"title": [{"text": {"content": name}}]}
        if day is not None:
            if time:
                # keep the business offset so Notion does not read the time as UTC
                start = datetime.combine(day, datetime.strptime(time, "%H:%M").time(), tzinfo=self._timezone)
                properties[PROP_DATE] = {"date": {"start": start.isoformat(timespec="seconds")}}
            else:
                properties[PROP_DATE] = {"date": {"start": day.isoformat()}}
        if email is not None:
            properties[PROP_EMAIL] = {"email": email}
        if phone is not None:
            properties[PROP_PHONE] = {"phone_number": phone}
        if amount is not None:
            properties[PROP_AMOUNT] = {"number": amount}
        if payment_type:
            properties[PROP_PAYMENT_TYPE] = {"select": {"name": payment_type}}
        return properties

    @staticmethod
    def _parse_page(page: dict[str, Any]) -> Reservation:
        props = page.get("properties", {})
        start = ((props.get(PROP_DATE) or {}).get("date") or {}).get("start") or ""
        if "T" in start:
            date_part, time_part = start.split("T", 1)
            time = time_part[:5]
        else:
            date_part, time = start, ""
        title = (props.get(PROP_NAME) or {}).get("title") or []
        return Reservation(
            id=page["id"],
            date=date.fromisoformat(date_part),
            time=time,
            name=title[0].get("plain_text", "") if title else "",
            email=(props.get(PROP_EMAIL) or {}).get("email") or "",
            phone=(props.get(PROP_PHONE) or {}).get("phone_number") or "",
            created_at=page.get("created_time"),
            amount=(props.get(PROP_AMOUNT) or {}).get("number"),
            payment_type=((props.get(PROP_PAYMENT_TYPE) or {}).get("select") or {}).get("name"),
        )
