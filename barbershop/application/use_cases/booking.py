from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.application.exceptions import (
    AvailabilityConflict,
    InvalidTransition,
    StoreUnavailable,
    ValidationError,
)
from barbershop.application.ports.calendar_export import CalendarExportPort
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.schedule_policy import DATE_STATUS_MESSAGES, DateStatus, SchedulePolicy
from barbershop.application.use_cases.send_confirmation import SendConfirmationUseCase
from barbershop.application.utils.contact import validate_contact
from barbershop.application.utils.date_parser import parse_time_label, to_local_naive
from barbershop.application.utils.state_helpers import require_step
from barbershop.domain.entities.booking_draft import BookingDraft, BookingStep
from barbershop.domain.entities.reservation import NewReservation, Reservation

ERROR_VALIDATION = "validation"
ERROR_CONFLICT = "conflict"
ERROR_STORE_UNAVAILABLE = "store_unavailable"
ERROR_NOT_FOUND = "not_found"

NO_AVAILABILITY_MESSAGE = "There are no available times for this day"
SLOT_TAKEN_MESSAGE = "Sorry, this time is no longer available. Please pick another one."
SAVE_FAILED_MESSAGE = "We could not save your booking. Please try again."


@dataclass(frozen=True)
class BookingResult:
    action: str
    draft: BookingDraft
    message: str | None = None
    error: str | None = None  # "validation", "conflict", "store_unavailable"
    fields: tuple[str, ...] = ()
    reservation: Reservation | None = None
    calendar: str | None = None
    notified: bool | None = None


class BookingFlowUseCase:
    """
    Drives the booking flow: date -> time -> details -> review -> confirmed.

    Every operation takes the current draft and returns a new one inside a
    BookingResult; drafts are never mutated. Recoverable failures come back as
    `result.error` with the draft left in the step the user can retry from.
    Calling an operation from the wrong step raises InvalidTransition.
    """

    def __init__(
        self,
        policy: SchedulePolicy,
        resolver: AvailabilityResolver,
        store: ReservationStorePort,
        send_confirmation: SendConfirmationUseCase,
        calendar_export: CalendarExportPort,
        timezone: ZoneInfo,
        require_phone: bool = True,
        calendar_reminder: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._policy = policy
        self._resolver = resolver
        self._store = store
        self._send_confirmation = send_confirmation
        self._calendar_export = calendar_export
        self._timezone = timezone
        self._require_phone = require_phone
        self._calendar_reminder = calendar_reminder
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def start(self) -> BookingResult:
        return BookingResult(action="ask_date", draft=BookingDraft())

    def select_date(self, draft: BookingDraft, day: date) -> BookingResult:
        require_step(draft.step, "select a date", BookingStep.SELECTING_DATE)
        now = self._clock()

        status = self._policy.date_status(day, to_local_naive(now, self._timezone).date())
        if status is not DateStatus.OPEN:
            return BookingResult(
                action="ask_date",
                draft=draft,
                message=DATE_STATUS_MESSAGES[status],
                error=ERROR_VALIDATION,
                fields=("date",),
            )

        slots = tuple(self._resolver.available_slots(day, now))
        next_draft = replace(draft, step=BookingStep.SELECTING_TIME, date=day, time=None, offered_slots=slots)
        if not slots:
            return BookingResult(action="no_availability", draft=next_draft, message=NO_AVAILABILITY_MESSAGE)
        return BookingResult(action="ask_time", draft=next_draft)

    def select_time(self, draft: BookingDraft, time: str) -> BookingResult:
        require_step(draft.step, "select a time", BookingStep.SELECTING_TIME)
        label = parse_time_label(time)
        if label is None:
            return BookingResult(
                action="ask_time",
                draft=draft,
                message="Please pick one of the offered times",
                error=ERROR_VALIDATION,
                fields=("time",),
            )

        # offers from an earlier call may be stale
        fresh = tuple(self._resolver.available_slots(draft.date, self._clock()))
        if label not in fresh:
            return BookingResult(
                action="ask_time",
                draft=replace(draft, offered_slots=fresh),
                message=SLOT_TAKEN_MESSAGE,
                error=ERROR_CONFLICT,
                fields=("time",),
            )

        return BookingResult(
            action="ask_details",
            draft=replace(draft, step=BookingStep.ENTERING_DETAILS, time=label, offered_slots=fresh),
        )

    def submit_details(
        self,
        draft: BookingDraft,
        name: str | None,
        email: str | None,
        phone: str | None = None,
    ) -> BookingResult:
        require_step(draft.step, "submit contact details", BookingStep.ENTERING_DETAILS)
        try:
            name, email, phone = validate_contact(name, email, phone, require_phone=self._require_phone)
        except ValidationError as e:
            return BookingResult(
                action="ask_details",
                draft=draft,
                message=str(e),
                error=ERROR_VALIDATION,
                fields=e.fields,
            )
        return BookingResult(
            action="review",
            draft=replace(draft, step=BookingStep.REVIEWING, name=name, email=email, phone=phone),
        )

    def confirm(self, draft: BookingDraft) -> BookingResult:
        require_step(draft.step, "confirm", BookingStep.REVIEWING)
        now = self._clock()

        try:
            # optimistic guard only; the store's own uniqueness check is what makes the write safe
            if not self._resolver.is_slot_available(draft.date, draft.time, now):
                raise AvailabilityConflict(draft.date, draft.time)
            reservation = self._store.create(
                NewReservation(
                    date=draft.date,
                    time=draft.time,
                    name=draft.name or "",
                    email=draft.email or "",
                    phone=draft.phone or "",
                )
            )
        except AvailabilityConflict as e:
            self._logger.info("Slot taken before confirmation", extra={"reason": str(e)})
            return self._back_to_time_selection(draft, now)
        except StoreUnavailable as e:
            self._logger.error("Error saving reservation", extra={"error": str(e)})
            return BookingResult(
                action="review",
                draft=draft,
                message=SAVE_FAILED_MESSAGE,
                error=ERROR_STORE_UNAVAILABLE,
            )

        self._logger.info(
            "Reservation confirmed",
            extra={"reservation_id": reservation.id, "date": reservation.date.isoformat(), "time": reservation.time},
        )
        notified = self._send_confirmation.execute(reservation)
        return BookingResult(
            action="booked",
            draft=replace(draft, step=BookingStep.CONFIRMED, offered_slots=(), reservation_id=reservation.id),
            reservation=reservation,
            calendar=self._build_calendar(reservation),
            notified=notified,
        )

    def back(self, draft: BookingDraft) -> BookingResult:
        if draft.step is BookingStep.SELECTING_TIME:
            return BookingResult(
                action="ask_date",
                draft=replace(draft, step=BookingStep.SELECTING_DATE, time=None, offered_slots=()),
            )
        if draft.step is BookingStep.ENTERING_DETAILS:
            return BookingResult(
                action="ask_time",
                draft=replace(draft, step=BookingStep.SELECTING_TIME, name=None, email=None, phone=None),
            )
        if draft.step is BookingStep.REVIEWING:
            return BookingResult(action="ask_details", draft=replace(draft, step=BookingStep.ENTERING_DETAILS))
        raise InvalidTransition(f"Cannot go back from {draft.step.value}")

    def cancel(self, draft: BookingDraft) -> BookingResult:
        if draft.step.is_terminal:
            raise InvalidTransition(f"Cannot cancel from {draft.step.value}")
        return BookingResult(action="cancelled", draft=BookingDraft(step=BookingStep.CANCELLED))

    def _back_to_time_selection(self, draft: BookingDraft, now: datetime) -> BookingResult:
        fresh = tuple(self._resolver.available_slots(draft.date, now))
        return BookingResult(
            action="ask_time",
            draft=replace(draft, step=BookingStep.SELECTING_TIME, time=None, offered_slots=fresh),
            message=SLOT_TAKEN_MESSAGE,
            error=ERROR_CONFLICT,
        )

    def _build_calendar(self, reservation: Reservation) -> str | None:
        try:
            return self._calendar_export.build(reservation, with_reminder=self._calendar_reminder)
        except Exception as e:
            self._logger.warning("Calendar export failed", extra={"reservation_id": reservation.id, "error": str(e)})
            return None

