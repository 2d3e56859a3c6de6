#!/usr/bin/env python3
"""
Interactive local booking harness (no HTTP).

Usage:
  python3 scripts/book_local.py

Walks the booking flow through the same use case the API uses, with the
store, holiday and email adapters chosen by the current settings.
Commands: /back, /cancel, /quit
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from barbershop.application.exceptions import InvalidTransition
from barbershop.application.use_cases.booking import BookingFlowUseCase, BookingResult
from barbershop.application.utils.date_parser import parse_iso_date
from barbershop.domain.entities.booking_draft import BookingStep
from barbershop.wiring.dependencies import get_booking_use_case


def _print_result(result: BookingResult) -> None:
    draft = result.draft
    print(f"\n[{draft.step.value}] action={result.action}")
    if result.message:
        print(f"  {result.message}")
    if result.error:
        print(f"  error: {result.error} {list(result.fields) or ''}")
    if draft.step is BookingStep.SELECTING_TIME and draft.offered_slots:
        print("  times: " + " ".join(draft.offered_slots))
    if draft.step is BookingStep.REVIEWING:
        print(f"  {draft.date} {draft.time} | {draft.name} | {draft.email} | {draft.phone}")
        print("  type 'yes' to confirm")
    if result.reservation:
        print(f"  reservation id: {result.reservation.id} (emails sent: {result.notified})")


def _step(use_case: BookingFlowUseCase, result: BookingResult, text: str) -> BookingResult:
    draft = result.draft
    if draft.step is BookingStep.SELECTING_DATE:
        try:
            day = parse_iso_date(text)
        except ValueError:
            print("  enter a date as YYYY-MM-DD")
            return result
        return use_case.select_date(draft, day)
    if draft.step is BookingStep.SELECTING_TIME:
        return use_case.select_time(draft, text)
    if draft.step is BookingStep.ENTERING_DETAILS:
        name, _, rest = text.partition(",")
        email, _, phone = rest.partition(",")
        return use_case.submit_details(draft, name, email, phone)
    if draft.step is BookingStep.REVIEWING and text.lower() in ("y", "yes"):
        return use_case.confirm(draft)
    return result


def main() -> None:
    use_case = get_booking_use_case()
    result = use_case.start()
    print("Local Booking Harness")
    print("-" * 60)
    print("Details are entered as: name, email, phone")
    _print_result(result)

    while not result.draft.step.is_terminal:
        try:
            text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return
        if not text:
            continue
        if text == "/quit":
            return

        try:
            if text == "/back":
                result = use_case.back(result.draft)
            elif text == "/cancel":
                result = use_case.cancel(result.draft)
            else:
                result = _step(use_case, result, text)
        except InvalidTransition as e:
            print(f"  {e}")
            continue
        _print_result(result)

    if result.calendar:
        path = ROOT / "appointment.ics"
        path.write_text(result.calendar, encoding="utf-8")
        print(f"\nCalendar file written to {path}")


if __name__ == "__main__":
    main()
