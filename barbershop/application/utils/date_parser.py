from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_iso_date(text: str) -> date:
    """Parse YYYY-MM-DD. Raises ValueError on anything else."""
    return date.fromisoformat(text.strip())


def parse_time_label(text: str) -> str | None:
    """Normalize "9:30" / "09:30" to "09:30". Returns None if not a valid time of day."""
    match = TIME_PATTERN.match(text or "")
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def add_months(day: date, months: int) -> date:
    """Calendar-month arithmetic, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def to_local_naive(moment: datetime, timezone: ZoneInfo) -> datetime:
    """Aware datetimes are converted to the business timezone; naive ones are taken as local already."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone).replace(tzinfo=None)
