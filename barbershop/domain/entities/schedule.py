from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time

SLOT_MINUTES = 30

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
SUNDAY = 6


@dataclass(frozen=True)
class TimeWindow:
    """Opening window; both boundaries are bookable start times."""

    start: time
    end: time

    def __post_init__(self) -> None:
        for boundary in (self.start, self.end):
            if boundary.minute % SLOT_MINUTES or boundary.second or boundary.microsecond:
                raise ValueError(f"Window boundary {boundary:%H:%M} is not on the {SLOT_MINUTES}-minute grid")
        if self.end < self.start:
            raise ValueError(f"Window ends before it starts: {self.label}")

    @staticmethod
    def parse(text: str) -> "TimeWindow":
        try:
            start_text, end_text = (part.strip() for part in text.split("-"))
            start = time.fromisoformat(start_text)
            end = time.fromisoformat(end_text)
        except ValueError as e:
            raise ValueError(f"Invalid opening window {text!r}, expected HH:MM-HH:MM") from e
        return TimeWindow(start=start, end=end)

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"


def parse_windows(text: str | None) -> tuple[TimeWindow, ...]:
    """Parse "10:00-13:30,17:00-20:30"; an empty value means closed."""
    if not text or not text.strip():
        return ()
    windows = tuple(TimeWindow.parse(chunk) for chunk in text.split(",") if chunk.strip())
    return tuple(sorted(windows, key=lambda w: w.start))


@dataclass(frozen=True)
class WeeklySchedule:
    # indexed by date.weekday(): 0 = Monday ... 6 = Sunday
    days: tuple[tuple[TimeWindow, ...], ...] = field(default_factory=lambda: ((),) * 7)

    def __post_init__(self) -> None:
        if len(self.days) != 7:
            raise ValueError("WeeklySchedule needs exactly seven days")
        if self.days[SUNDAY]:
            raise ValueError("Sunday is always closed")

    def windows_for(self, weekday: int) -> tuple[TimeWindow, ...]:
        return self.days[weekday]

    def is_closed_weekday(self, weekday: int) -> bool:
        return not self.days[weekday]

    @staticmethod
    def from_config(
        weekday_hours: str,
        saturday_hours: str = "",
        overrides: dict[str, str] | None = None,
    ) -> "WeeklySchedule":
        weekday_windows = parse_windows(weekday_hours)
        days = [weekday_windows] * 5 + [parse_windows(saturday_hours), ()]
        for name, hours in (overrides or {}).items():
            key = name.strip().lower()
            if key not in WEEKDAY_NAMES:
                raise ValueError(f"Unknown weekday in opening hours: {name!r}")
            days[WEEKDAY_NAMES.index(key)] = parse_windows(hours)
        return WeeklySchedule(days=tuple(days))
