"""
Tests for the JSON file reservation store.
"""

from __future__ import annotations

import json
import tempfile
from datetime import date
from pathlib import Path

import pytest

from barbershop.application.exceptions import AvailabilityConflict, ReservationNotFound, StoreUnavailable
from barbershop.domain.entities.reservation import NewReservation
from barbershop.infrastructure.store.json_store import JsonReservationStore

THURSDAY = date(2025, 2, 20)
FRIDAY = date(2025, 2, 21)


def _new(day: date = THURSDAY, time: str = "10:00", phone: str = "600111222") -> NewReservation:
    return NewReservation(date=day, time=time, name="Ana", email="ana@example.com", phone=phone)


def test_reservations_survive_a_restart():
    """A new store on the same file sees earlier writes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "reservations.json")
        created = JsonReservationStore(path).create(_new())

        reopened = JsonReservationStore(path)
        assert reopened.get(created.id) == created
        assert [r.time for r in reopened.list_by_date(THURSDAY)] == ["10:00"]


def test_archive_keeps_the_record():
    """Cancelled reservations stay in the file but no longer block or list."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "reservations.json"
        store = JsonReservationStore(str(path))
        created = store.create(_new())

        assert store.archive(created.id) is True
        assert store.archive(created.id) is False
        assert store.get(created.id) is None
        assert store.list_by_date(THURSDAY) == []

        records = json.loads(path.read_text(encoding="utf-8"))["reservations"]
        assert len(records) == 1
        assert records[0]["archived"] is True
        assert "archived_at" in records[0]

        store.create(_new())  # slot is free again


def test_duplicate_slot_is_refused():
    """(date, time) is unique among active reservations."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonReservationStore(str(Path(tmpdir) / "reservations.json"))
        store.create(_new())

        with pytest.raises(AvailabilityConflict):
            store.create(_new(phone="699000000"))
        store.create(_new(time="10:30", phone="699000000"))


def test_update_moves_and_checks_the_target_slot():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonReservationStore(str(Path(tmpdir) / "reservations.json"))
        own = store.create(_new())
        store.create(_new(time="10:30", phone="699000000"))

        with pytest.raises(AvailabilityConflict):
            store.update(own.id, THURSDAY, "10:30")
        with pytest.raises(ReservationNotFound):
            store.update("missing", THURSDAY, "11:00")

        moved = store.update(own.id, FRIDAY, "17:00")
        assert moved.id == own.id
        assert (moved.date, moved.time) == (FRIDAY, "17:00")
        assert store.update(own.id, FRIDAY, "17:00").time == "17:00"  # same slot is allowed


def test_list_by_phone_is_sorted_and_bounded():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonReservationStore(str(Path(tmpdir) / "reservations.json"))
        store.create(_new(day=FRIDAY, time="17:00"))
        store.create(_new(day=THURSDAY, time="11:00"))
        store.create(_new(day=date(2025, 2, 10), time="10:00"))
        store.create(_new(day=THURSDAY, time="10:00", phone="699000000"))

        found = store.list_by_phone("600111222", THURSDAY)
        assert [(r.date, r.time) for r in found] == [(THURSDAY, "11:00"), (FRIDAY, "17:00")]


def test_corrupt_file_is_reported_as_unavailable():
    """An unreadable document must not be silently treated as empty."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "reservations.json"
        path.write_text("{not json", encoding="utf-8")
        store = JsonReservationStore(str(path))

        with pytest.raises(StoreUnavailable):
            store.list_by_date(THURSDAY)
        with pytest.raises(StoreUnavailable):
            store.create(_new())


def test_optional_amount_and_payment_type_are_stored():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "reservations.json")
        created = JsonReservationStore(path).create(
            NewReservation(
                date=THURSDAY,
                time="10:00",
                name="Ana",
                email="ana@example.com",
                phone="600111222",
                amount=15.0,
                payment_type="Efectivo",
            )
        )
        reopened = JsonReservationStore(path).get(created.id)
        assert (reopened.amount, reopened.payment_type) == (15.0, "Efectivo")
        assert JsonReservationStore(path).create(_new(time="10:30")).amount is None
