from __future__ import annotations

from datetime import date


class BookingError(Exception):
    """Base class for errors scoped to a single booking flow."""
    pass


class ValidationError(BookingError):
    """Raised when form fields are missing/invalid or a date cannot be booked."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields


class AvailabilityConflict(BookingError):
    """Raised when a slot was taken between selection and confirmation."""

    def __init__(self, day: date, time: str) -> None:
        super().__init__(f"Slot {day.isoformat()} {time} is no longer available")
        self.date = day
        self.time = time


class StoreUnavailable(BookingError):
    """Raised when the reservation store fails (timeouts, network errors, corrupt data)."""
    pass


class NotificationFailure(BookingError):
    """Raised when a confirmation message could not be delivered."""
    pass


class ReservationNotFound(BookingError):
    """Raised when a reservation id is unknown to the store."""
    pass


class InvalidTransition(BookingError):
    """Raised when a flow operation is called from the wrong step."""
    pass
