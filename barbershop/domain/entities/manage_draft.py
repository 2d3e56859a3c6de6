from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from barbershop.domain.entities.reservation import Reservation


class ManageStep(str, Enum):
    ENTERING_PHONE = "entering_phone"
    LISTING = "listing"
    SELECTING_DATE = "selecting_date"
    SELECTING_TIME = "selecting_time"
    CONFIRMING = "confirming"
    DONE = "done"
    CLOSED = "closed"

    @property
    def is_terminal(self) -> bool:
        return self in (ManageStep.DONE, ManageStep.CLOSED)


class ManageAction(str, Enum):
    CANCEL = "cancel"
    EDIT = "edit"


@dataclass(frozen=True)
class ManageDraft:
    step: ManageStep = ManageStep.ENTERING_PHONE
    phone: str | None = None
    reservations: tuple[Reservation, ...] = ()
    selected: Reservation | None = None
    action: ManageAction | None = None
    date: date | None = None  # new date when editing
    time: str | None = None  # new time when editing
    offered_slots: tuple[str, ...] = ()
