from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from barbershop.application.exceptions import (
    AvailabilityConflict,
    InvalidTransition,
    ReservationNotFound,
    StoreUnavailable,
)
from barbershop.application.ports.calendar_export import CalendarExportPort
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.application.use_cases.availability import AvailabilityResolver
from barbershop.application.use_cases.booking import (
    ERROR_CONFLICT,
    ERROR_NOT_FOUND,
    ERROR_STORE_UNAVAILABLE,
    ERROR_VALIDATION,
    NO_AVAILABILITY_MESSAGE,
    SLOT_TAKEN_MESSAGE,
)
from barbershop.application.use_cases.schedule_policy import DATE_STATUS_MESSAGES, DateStatus, SchedulePolicy
from barbershop.application.utils.contact import normalize_phone
from barbershop.application.utils.date_parser import parse_time_label, to_local_naive
from barbershop.application.utils.state_helpers import require_step
from barbershop.domain.entities.manage_draft import ManageAction, ManageDraft, ManageStep
from barbershop.domain.entities.reservation import Reservation


@dataclass(frozen=True)
class ManageResult:
    action: str
    draft: ManageDraft
    message: str | None = None
    error: str | None = None
    reservation: Reservation | None = None
    calendar: str | None = None


class ManageBookingUseCase:
    """
    Lets a customer find their upcoming reservations by phone and cancel or
    reschedule one of them.

    Rescheduling reuses the availability rules of the booking flow, with the
    reservation being edited excluded from the conflict checks.
    """

    def __init__(
        self,
        policy: SchedulePolicy,
        resolver: AvailabilityResolver,
        store: ReservationStorePort,
        calendar_export: CalendarExportPort,
        timezone: ZoneInfo,
        calendar_reminder: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._policy = policy
        self._resolver = resolver
        self._store = store
        self._calendar_export = calendar_export
        self._timezone = timezone
        self._calendar_reminder = calendar_reminder
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def start(self) -> ManageResult:
        return ManageResult(action="ask_phone", draft=ManageDraft())

    def lookup(self, draft: ManageDraft, phone: str | None) -> ManageResult:
        require_step(draft.step, "look up reservations", ManageStep.ENTERING_PHONE)
        cleaned = normalize_phone(phone)
        if not cleaned:
            return ManageResult(
                action="ask_phone",
                draft=draft,
                message="Please enter your phone number",
                error=ERROR_VALIDATION,
            )

        local_now = to_local_naive(self._clock(), self._timezone)
        try:
            found = self._store.list_by_phone(cleaned, local_now.date())
        except StoreUnavailable as e:
            self._logger.error("Error looking up reservations", extra={"error": str(e)})
            return ManageResult(
                action="ask_phone",
                draft=replace(draft, phone=cleaned),
                message="We could not look up your reservations. Please try again.",
                error=ERROR_STORE_UNAVAILABLE,
            )

        upcoming = tuple(r for r in found if r.starts_at > local_now)
        if not upcoming:
            return ManageResult(
                action="ask_phone",
                draft=replace(draft, phone=cleaned),
                message="No reservations found for this phone number",
                error=ERROR_NOT_FOUND,
            )
        return ManageResult(
            action="list",
            draft=replace(draft, step=ManageStep.LISTING, phone=cleaned, reservations=upcoming),
        )

    def choose(self, draft: ManageDraft, reservation_id: str, action: ManageAction | str) -> ManageResult:
        require_step(draft.step, "choose a reservation", ManageStep.LISTING)
        selected = next((r for r in draft.reservations if r.id == reservation_id), None)
        if selected is None:
            return ManageResult(
                action="list",
                draft=draft,
                message="Please pick one of your reservations",
                error=ERROR_VALIDATION,
            )

        action = ManageAction(action)
        if action is ManageAction.CANCEL:
            return ManageResult(
                action="confirm_cancel",
                draft=replace(draft, step=ManageStep.CONFIRMING, selected=selected, action=action),
            )
        return ManageResult(
            action="ask_date",
            draft=replace(draft, step=ManageStep.SELECTING_DATE, selected=selected, action=action),
        )

    def select_date(self, draft: ManageDraft, day: date) -> ManageResult:
        require_step(draft.step, "select a date", ManageStep.SELECTING_DATE)
        now = self._clock()

        status = self._policy.date_status(day, to_local_naive(now, self._timezone).date())
        if status is not DateStatus.OPEN:
            return ManageResult(
                action="ask_date",
                draft=draft,
                message=DATE_STATUS_MESSAGES[status],
                error=ERROR_VALIDATION,
            )

        slots = tuple(self._resolver.available_slots(day, now, editing=draft.selected))
        next_draft = replace(draft, step=ManageStep.SELECTING_TIME, date=day, time=None, offered_slots=slots)
        if not slots:
            return ManageResult(action="no_availability", draft=next_draft, message=NO_AVAILABILITY_MESSAGE)
        return ManageResult(action="ask_time", draft=next_draft)

    def select_time(self, draft: ManageDraft, time: str) -> ManageResult:
        require_step(draft.step, "select a time", ManageStep.SELECTING_TIME)
        label = parse_time_label(time)
        fresh = tuple(self._resolver.available_slots(draft.date, self._clock(), editing=draft.selected))
        if label is None or label not in fresh:
            return ManageResult(
                action="ask_time",
                draft=replace(draft, offered_slots=fresh),
                message=SLOT_TAKEN_MESSAGE if label else "Please pick one of the offered times",
                error=ERROR_CONFLICT if label else ERROR_VALIDATION,
            )
        return ManageResult(
            action="confirm_edit",
            draft=replace(draft, step=ManageStep.CONFIRMING, time=label, offered_slots=fresh),
        )

    def confirm(self, draft: ManageDraft) -> ManageResult:
        require_step(draft.step, "confirm", ManageStep.CONFIRMING)
        if draft.action is ManageAction.CANCEL:
            return self._confirm_cancel(draft)
        return self._confirm_edit(draft)

    def back(self, draft: ManageDraft) -> ManageResult:
        if draft.step is ManageStep.LISTING:
            return ManageResult(action="ask_phone", draft=replace(draft, step=ManageStep.ENTERING_PHONE, reservations=()))
        if draft.step is ManageStep.SELECTING_DATE:
            return ManageResult(action="list", draft=replace(draft, step=ManageStep.LISTING, selected=None, action=None))
        if draft.step is ManageStep.SELECTING_TIME:
            return ManageResult(
                action="ask_date",
                draft=replace(draft, step=ManageStep.SELECTING_DATE, time=None, offered_slots=()),
            )
        if draft.step is ManageStep.CONFIRMING:
            if draft.action is ManageAction.CANCEL:
                return ManageResult(action="list", draft=replace(draft, step=ManageStep.LISTING, selected=None, action=None))
            return ManageResult(action="ask_time", draft=replace(draft, step=ManageStep.SELECTING_TIME))
        raise InvalidTransition(f"Cannot go back from {draft.step.value}")

    def close(self, draft: ManageDraft) -> ManageResult:
        if draft.step.is_terminal:
            raise InvalidTransition(f"Cannot close from {draft.step.value}")
        return ManageResult(action="closed", draft=ManageDraft(step=ManageStep.CLOSED))

    def _confirm_cancel(self, draft: ManageDraft) -> ManageResult:
        selected = draft.selected
        try:
            archived = self._store.archive(selected.id)
        except StoreUnavailable as e:
            self._logger.error("Error cancelling reservation", extra={"reservation_id": selected.id, "error": str(e)})
            return ManageResult(
                action="confirm_cancel",
                draft=draft,
                message="We could not cancel your reservation. Please try again.",
                error=ERROR_STORE_UNAVAILABLE,
            )
        if not archived:
            return ManageResult(
                action="confirm_cancel",
                draft=draft,
                message="This reservation no longer exists",
                error=ERROR_NOT_FOUND,
            )

        self._logger.info("Reservation cancelled", extra={"reservation_id": selected.id})
        return ManageResult(
            action="cancelled",
            draft=replace(draft, step=ManageStep.DONE),
            message="Reservation cancelled",
            reservation=selected,
        )

    def _confirm_edit(self, draft: ManageDraft) -> ManageResult:
        selected = draft.selected
        now = self._clock()
        try:
            if not self._resolver.is_slot_available(draft.date, draft.time, now, exclude_id=selected.id):
                raise AvailabilityConflict(draft.date, draft.time)
            updated = self._store.update(selected.id, draft.date, draft.time)
        except AvailabilityConflict as e:
            self._logger.info("Slot taken before reschedule", extra={"reservation_id": selected.id, "reason": str(e)})
            fresh = tuple(self._resolver.available_slots(draft.date, now, editing=selected))
            return ManageResult(
                action="ask_time",
                draft=replace(draft, step=ManageStep.SELECTING_TIME, time=None, offered_slots=fresh),
                message=SLOT_TAKEN_MESSAGE,
                error=ERROR_CONFLICT,
            )
        except ReservationNotFound:
            return ManageResult(
                action="confirm_edit",
                draft=draft,
                message="This reservation no longer exists",
                error=ERROR_NOT_FOUND,
            )
        except StoreUnavailable as e:
            self._logger.error("Error rescheduling reservation", extra={"reservation_id": selected.id, "error": str(e)})
            return ManageResult(
                action="confirm_edit",
                draft=draft,
                message="We could not change your reservation. Please try again.",
                error=ERROR_STORE_UNAVAILABLE,
            )

        self._logger.info(
            "Reservation rescheduled",
            extra={"reservation_id": updated.id, "date": updated.date.isoformat(), "time": updated.time},
        )
        calendar = None
        try:
            calendar = self._calendar_export.build(updated, with_reminder=self._calendar_reminder)
        except Exception as e:
            self._logger.warning("Calendar export failed", extra={"reservation_id": updated.id, "error": str(e)})
        return ManageResult(
            action="rescheduled",
            draft=replace(draft, step=ManageStep.DONE, selected=updated, offered_slots=()),
            message="Reservation changed",
            reservation=updated,
            calendar=calendar,
        )
