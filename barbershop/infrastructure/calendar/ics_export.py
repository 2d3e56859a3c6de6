from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.application.ports.calendar_export import CalendarExportPort
from barbershop.domain.entities.reservation import Reservation
from barbershop.domain.entities.schedule import SLOT_MINUTES

UTC = ZoneInfo("UTC")
ICS_DATETIME = "%Y%m%dT%H%M%SZ"


def escape_text(value: str) -> str:
    """Escape a TEXT value per RFC 5545."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


class IcsCalendarExport(CalendarExportPort):
    """
    iCalendar (.ics) event for a reservation.

    Start/end are written in UTC; the appointment always lasts one slot.
    Given the same reservation and clock the output only differs in UID.
    """

    def __init__(
        self,
        business_name: str,
        location: str,
        timezone: ZoneInfo,
        uid_domain: str = "barbershop.local",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._business_name = business_name
        self._location = location
        self._timezone = timezone
        self._uid_domain = uid_domain
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def media_type(self) -> str:
        return "text/calendar"

    def build(self, reservation: Reservation, with_reminder: bool = True) -> str:
        start = reservation.starts_at.replace(tzinfo=self._timezone).astimezone(UTC)
        end = start + timedelta(minutes=SLOT_MINUTES)

        if with_reminder:
            description = f"Booking confirmed for {reservation.name}\nPlease arrive 5 minutes early."
        else:
            description = f"Client: {reservation.name}\nEmail: {reservation.email}\nPhone: {reservation.phone}"

        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:-//{self._business_name}//Booking System//EN",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            "BEGIN:VEVENT",
            f"UID:{uuid.uuid4().hex}@{self._uid_domain}",
            f"DTSTAMP:{self._clock().astimezone(UTC).strftime(ICS_DATETIME)}",
            f"DTSTART:{start.strftime(ICS_DATETIME)}",
            f"DTEND:{end.strftime(ICS_DATETIME)}",
            f"SUMMARY:{escape_text(f'Appointment at {self._business_name}')}",
            f"DESCRIPTION:{escape_text(description)}",
            f"LOCATION:{escape_text(self._location)}",
            "STATUS:CONFIRMED",
            "SEQUENCE:0",
        ]
        if with_reminder:
            lines += [
                "BEGIN:VALARM",
                "TRIGGER:-P1D",
                "ACTION:DISPLAY",
                f"DESCRIPTION:{escape_text(f'Reminder: appointment tomorrow at {self._business_name}')}",
                "END:VALARM",
            ]
        lines += ["END:VEVENT", "END:VCALENDAR"]
        return "\r\n".join(lines) + "\r\n"
