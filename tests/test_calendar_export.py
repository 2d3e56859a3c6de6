"""
Tests for the iCalendar export.
"""

from __future__ import annotations

from datetime import date

from barbershop.domain.entities.reservation import Reservation
from barbershop.infrastructure.calendar.ics_export import escape_text

WINTER = Reservation(id="r1", date=date(2025, 2, 20), time="10:00", name="Ana", email="ana@example.com", phone="600111222")
SUMMER = Reservation(id="r2", date=date(2025, 7, 10), time="20:30", name="Ana", email="ana@example.com", phone="600111222")


def _field(ics: str, name: str) -> list[str]:
    return [line.split(":", 1)[1] for line in ics.split("\r\n") if line.startswith(f"{name}:")]


def test_times_are_written_in_utc(calendar_export):
    """10:00 Madrid is 09:00Z in winter; 20:30 is 18:30Z in summer."""
    winter = calendar_export.build(WINTER)
    assert _field(winter, "DTSTART") == ["20250220T090000Z"]
    assert _field(winter, "DTEND") == ["20250220T093000Z"]

    summer = calendar_export.build(SUMMER)
    assert _field(summer, "DTSTART") == ["20250710T183000Z"]
    assert _field(summer, "DTEND") == ["20250710T190000Z"]


def test_document_structure(calendar_export):
    ics = calendar_export.build(WINTER)
    assert ics.startswith("BEGIN:VCALENDAR\r\n")
    assert ics.endswith("END:VCALENDAR\r\n")
    assert _field(ics, "SUMMARY") == ["Appointment at 41 Hair Studio"]
    assert _field(ics, "DTSTAMP") == ["20250219T080000Z"]
    assert _field(ics, "LOCATION") == ["Parque de los Alcornocales\\, 1\\, Norte\\, 41015 Sevilla"]
    assert _field(ics, "UID")[0].endswith("@barbershop.local")


def test_reminder_is_optional(calendar_export):
    with_reminder = calendar_export.build(WINTER, with_reminder=True)
    assert "BEGIN:VALARM" in with_reminder
    assert "TRIGGER:-P1D" in with_reminder

    without = calendar_export.build(WINTER, with_reminder=False)
    assert "VALARM" not in without
    assert "600111222" in _field(without, "DESCRIPTION")[0]


def test_each_build_has_a_fresh_uid(calendar_export):
    """Apart from the UID, the same reservation renders identically."""
    first = calendar_export.build(WINTER)
    second = calendar_export.build(WINTER)
    assert _field(first, "UID") != _field(second, "UID")
    assert first.replace(_field(first, "UID")[0], "") == second.replace(_field(second, "UID")[0], "")


def test_escape_text():
    assert escape_text("a;b,c\\d\ne") == "a\\;b\\,c\\\\d\\ne"
