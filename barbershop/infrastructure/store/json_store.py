from __future__ import annotations

import json
import threading
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from barbershop.application.exceptions import AvailabilityConflict, ReservationNotFound, StoreUnavailable
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.utils.slots import is_slot_free
from barbershop.domain.entities.reservation import NewReservation, Reservation


class JsonReservationStore(ReservationStorePort):
    """
    Flat-file store. All reservations live in one JSON document; cancelled
    ones are kept with `archived: true` for the audit trail.

    Reads and writes are serialized by a process-wide lock and the file is
    replaced atomically, so (date, time) uniqueness holds for a single process.
    """

    def __init__(self, path: str = "./data/reservations.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def list_by_date(self, day: date) -> list[Reservation]:
        with self._lock:
            return self._active_on(self._load(), day)

    def list_by_phone(self, phone: str, from_date: date) -> list[Reservation]:
        with self._lock:
            records = self._load()["reservations"]
        found = [
            self._deserialize(r)
            for r in records
            if not r.get("archived") and r.get("phone") == phone and r.get("date", "") >= from_date.isoformat()
        ]
        return sorted(found, key=lambda r: (r.date, r.time))

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            record = self._find(self._load(), reservation_id)
        if record is None or record.get("archived"):
            return None
        return self._deserialize(record)

    def create(self, reservation: NewReservation) -> Reservation:
        with self._lock:
            data = self._load()
            if not is_slot_free(reservation.time, self._active_on(data, reservation.date)):
                raise AvailabilityConflict(reservation.date, reservation.time)
            created = Reservation(
                id=uuid.uuid4().hex,
                date=reservation.date,
                time=reservation.time,
                name=reservation.name,
                email=reservation.email,
                phone=reservation.phone,
                created_at=datetime.now(timezone.utc).isoformat(),
                amount=reservation.amount,
                payment_type=reservation.payment_type,
            )
            data["reservations"].append(self._serialize(created))
            self._save(data)
            return created

    def archive(self, reservation_id: str) -> bool:
        with self._lock:
            data = self._load()
            record = self._find(data, reservation_id)
            if record is None or record.get("archived"):
                return False
            record["archived"] = True
            record["archived_at"] = datetime.now(timezone.utc).isoformat()
            self._save(data)
            return True

    def update(self, reservation_id: str, day: date, time: str) -> Reservation:
        with self._lock:
            data = self._load()
            record = self._find(data, reservation_id)
            if record is None or record.get("archived"):
                raise ReservationNotFound(reservation_id)
            if not is_slot_free(time, self._active_on(data, day), exclude_id=reservation_id):
                raise AvailabilityConflict(day, time)
            record["date"] = day.isoformat()
            record["time"] = time
            self._save(data)
            return self._deserialize(record)

    def _load(self) -> dict[str, Any]:
        """Load the document, or an empty one if the file does not exist yet."""
        if not self._path.exists():
            return {"reservations": [], "version": 1}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreUnavailable(f"Cannot read {self._path}: {e}") from e
        data.setdefault("reservations", [])
        data.setdefault("version", 1)
        return data

    def _save(self, data: dict[str, Any]) -> None:
        """Save the document atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise StoreUnavailable(f"Cannot write {self._path}: {e}") from e

    def _active_on(self, data: dict[str, Any], day: date) -> list[Reservation]:
        iso = day.isoformat()
        return [self._deserialize(r) for r in data["reservations"] if not r.get("archived") and r.get("date") == iso]

    @staticmethod
    def _find(data: dict[str, Any], reservation_id: str) -> dict[str, Any] | None:
        return next((r for r in data["reservations"] if r.get("id") == reservation_id), None)

    @staticmethod
    def _serialize(reservation: Reservation) -> dict[str, Any]:
        return {
            "id": reservation.id,
            "date": reservation.date.isoformat(),
            "time": reservation.time,
            "name": reservation.name,
            "email": reservation.email,
            "phone": reservation.phone,
            "created_at": reservation.created_at,
            "amount": reservation.amount,
            "payment_type": reservation.payment_type,
            "archived": False,
        }

    @staticmethod
    def _deserialize(data: dict[str, Any]) -> Reservation:
        return Reservation(
            id=data["id"],
            date=date.fromisoformat(data["date"]),
            time=data["time"],
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            created_at=data.get("created_at"),
            amount=data.get("amount"),
            payment_type=data.get("payment_type"),
        )
